from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from companion.app.errors import NotInitializedError, SessionNotFoundError
from companion.core.clock import Clock, now_ms
from companion.db.json_store import JsonStore
from companion.db.schemas import (
    DisplayInfo,
    MemoryProfile,
    MemoryUpdate,
    Message,
    Session,
    Statistics,
    Store,
)
from companion.session.memory import MemoryConfig, SessionMemoryStore, default_profile

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Single owner of the Store aggregate. Every mutation goes through here and
    is followed by a full persist of the document.

    Mutations and the sweep are serialized on one store lock. `user_lock`
    additionally lets a caller hold one user's session across a whole exchange
    (user message -> generation -> reply) so two messages from the same user
    cannot interleave.
    """

    def __init__(
        self,
        store: JsonStore,
        *,
        max_history_length: int = 30,
        clock: Clock = now_ms,
    ):
        self.store = store
        self.clock = clock
        self.memory = SessionMemoryStore(MemoryConfig(max_messages=max_history_length))
        self._data: Optional[Store] = None
        self._lock = threading.RLock()
        self._user_locks: Dict[int, threading.Lock] = {}
        self._user_locks_guard = threading.Lock()

    # ---------- Lifecycle ----------
    def initialize(self) -> None:
        with self._lock:
            if self._data is not None:
                return
            self._data = self.store.load()
            logger.info("Session manager initialized", extra={"sessions": len(self._data.sessions)})

    @property
    def initialized(self) -> bool:
        return self._data is not None

    def _require(self) -> Store:
        if self._data is None:
            raise NotInitializedError("Session manager not initialized")
        return self._data

    def _save(self) -> None:
        self.store.persist(self._require())

    @contextmanager
    def user_lock(self, user_id: int) -> Iterator[None]:
        with self._user_locks_guard:
            lock = self._user_locks.setdefault(user_id, threading.Lock())
        with lock:
            yield

    # ---------- Sessions ----------
    def get_or_create_session(
        self,
        chat_id: int,
        user_id: int,
        display_info: Optional[Union[DisplayInfo, Mapping[str, Any]]] = None,
    ) -> Session:
        with self._lock:
            data = self._require()
            now = self.clock()
            session = data.sessions.get(user_id)

            if session is None:
                if display_info is not None and not isinstance(display_info, DisplayInfo):
                    display_info = DisplayInfo.model_validate(dict(display_info))
                session = Session(
                    chat_id=chat_id,
                    user_id=user_id,
                    display_info=display_info,
                    history=self.memory.seed_history(now),
                    memory=default_profile(),
                    created_at=now,
                    last_activity=now,
                )
                data.sessions[user_id] = session
                data.statistics.total_users += 1
                self._save()
                logger.info("New user session created", extra={"user_id": user_id, "chat_id": chat_id})
            else:
                session.last_activity = now
                self._save()

            return session.model_copy(deep=True)

    def get_session(self, user_id: int) -> Optional[Session]:
        """Read-only lookup; does not count as activity."""
        with self._lock:
            session = self._require().sessions.get(user_id)
            return session.model_copy(deep=True) if session else None

    # ---------- History ----------
    def append_message(self, user_id: int, message: Message) -> None:
        with self._lock:
            data = self._require()
            session = data.sessions.get(user_id)
            if session is None:
                raise SessionNotFoundError(f"User session not found: {user_id}")

            # timestamps never go backwards within one history
            if session.history and message.timestamp < session.history[-1].timestamp:
                message = message.model_copy(update={"timestamp": session.history[-1].timestamp})

            session.history = self.memory.append(session.history, message)
            session.last_activity = self.clock()
            data.statistics.total_messages += 1
            self._save()

    def get_history(self, user_id: int) -> List[Message]:
        with self._lock:
            session = self._require().sessions.get(user_id)
            return list(session.history) if session else []

    def clear_history(self, user_id: int) -> None:
        with self._lock:
            session = self._require().sessions.get(user_id)
            if session is None:
                return
            session.history = self.memory.seed_history(self.clock())
            self._save()
            logger.info("History cleared for user", extra={"user_id": user_id})

    # ---------- Memory ----------
    def update_memory(self, user_id: int, partial: Union[MemoryUpdate, Mapping[str, Any]]) -> None:
        with self._lock:
            session = self._require().sessions.get(user_id)
            if session is None:
                return
            session.memory = self.memory.merge(session.memory, partial)
            self._save()
            logger.info("User memory updated", extra={"user_id": user_id})

    def get_memory(self, user_id: int) -> Optional[MemoryProfile]:
        with self._lock:
            session = self._require().sessions.get(user_id)
            return session.memory.model_copy(deep=True) if session else None

    # ---------- Aggregates ----------
    def get_statistics(self) -> Statistics:
        with self._lock:
            return self._require().statistics.model_copy()

    def sweep_inactive(self, max_idle: timedelta = timedelta(days=30)) -> int:
        """
        Delete sessions idle for longer than `max_idle`. total_users is a
        historical counter and is left alone. Returns the number removed.
        """
        with self._lock:
            data = self._require()
            cutoff = self.clock() - int(max_idle.total_seconds() * 1000)
            stale = [uid for uid, s in data.sessions.items() if s.last_activity < cutoff]
            if not stale:
                return 0

            for uid in stale:
                del data.sessions[uid]
            self._save()

        with self._user_locks_guard:
            for uid in stale:
                lock = self._user_locks.get(uid)
                if lock is not None and not lock.locked():
                    del self._user_locks[uid]

        logger.info("Cleaned up inactive users", extra={"count": len(stale)})
        return len(stale)

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from companion.app.errors import PersistenceError
from companion.core.clock import Clock, now_ms
from companion.db.schemas import Store

logger = logging.getLogger(__name__)


class JsonStore:
    """
    Durable home of the Store aggregate: one JSON document at a fixed path,
    rewritten in full on every persist.
    """

    def __init__(self, path: Union[str, Path], clock: Clock = now_ms):
        self.path = Path(path)
        self.clock = clock

    def load(self) -> Store:
        """
        Read the document. A missing or corrupt document means "no prior state":
        an empty store is created and written out immediately.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("No store document found, creating a new one", extra={"path": str(self.path)})
            return self._reset()
        except OSError as e:
            raise PersistenceError(f"Cannot read store document {self.path}: {e}") from e

        try:
            store = Store.model_validate_json(raw)
        except ValueError as e:
            # bad JSON, bad UTF-8 and schema mismatches all surface as ValidationError
            logger.warning(
                "Store document is corrupt, starting from an empty store",
                extra={"path": str(self.path), "error": str(e)[:500]},
            )
            return self._reset()

        logger.info(
            "Store loaded",
            extra={"path": str(self.path), "sessions": len(store.sessions)},
        )
        return store

    def persist(self, store: Store) -> None:
        """
        Atomically replace the document: write a temp file beside it, fsync, rename.
        """
        payload = store.model_dump_json(by_alias=True, indent=2)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
            self._sync_dir()
        except OSError as e:
            logger.error("Failed to save store document", extra={"path": str(self.path)}, exc_info=True)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Cannot write store document {self.path}: {e}") from e

    def _sync_dir(self) -> None:
        """Make the rename itself durable. POSIX only; Windows cannot open directories."""
        if os.name != "posix":
            return
        dir_fd = os.open(self.path.parent, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)

    def _reset(self) -> Store:
        store = Store.empty(self.clock())
        self.persist(store)
        return store

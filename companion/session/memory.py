from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from companion.db.schemas import MemoryProfile, MemoryUpdate, Message
from companion.llms.prompt_registry import get_prompt


@dataclass
class MemoryConfig:
    """
    Keep history bounded. One slot is always reserved for the system message.
    """
    max_messages: int = 30

    def __post_init__(self) -> None:
        if self.max_messages < 2:
            raise ValueError(f"max_messages must be at least 2, got {self.max_messages}")


def default_profile() -> MemoryProfile:
    """Profile every new session starts with."""
    return MemoryProfile(
        interests=["emotional support", "sobriety", "recovery"],
        goals=["maintaining sobriety", "emotional recovery", "managing depression"],
        communication_style="therapeutic_support",
        preferences={
            "tone": "friendly, calm, confident, compassionate",
            "style": "plain words, with warmth",
            "crisis_support": True,
        },
    )


class SessionMemoryStore:
    """
    Pure helpers for the history window and the memory profile of a session.
    Nothing here touches the disk; the session manager persists the results.
    """

    def __init__(self, config: Optional[MemoryConfig] = None):
        self.config = config or MemoryConfig()

    def seed_history(self, ts: int) -> List[Message]:
        return [Message(role="system", content=get_prompt("system_seed"), timestamp=ts)]

    def append(self, history: List[Message], message: Message) -> List[Message]:
        msgs = list(history)
        msgs.append(message)
        return self._trim_messages(msgs)

    def merge(
        self,
        profile: MemoryProfile,
        partial: Union[MemoryUpdate, Mapping[str, Any]],
    ) -> MemoryProfile:
        """
        Shallow merge: provided fields replace wholesale, omitted ones are kept.
        """
        if not isinstance(partial, MemoryUpdate):
            partial = MemoryUpdate.model_validate(dict(partial))
        changes = partial.model_dump(exclude_unset=True, exclude_none=True)
        return profile.model_copy(update=changes)

    # -------------------------
    # internal trimming helpers
    # -------------------------
    def _trim_messages(self, msgs: List[Message]) -> List[Message]:
        limit = self.config.max_messages
        if len(msgs) <= limit:
            return msgs

        tail_start = len(msgs) - (limit - 1)
        system_idx = None
        for i in range(len(msgs) - 1, -1, -1):
            if msgs[i].role == "system":
                system_idx = i
                break

        # A system message already inside the tail is kept once, not twice.
        if system_idx is None or system_idx >= tail_start:
            return msgs[tail_start:]
        return [msgs[system_idx]] + msgs[tail_start:]

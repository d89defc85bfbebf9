from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional, Union

Role = Literal["user", "assistant", "system"]
MessageKind = Literal["text", "image", "voice"]

# bool first so that `true` is never coerced to 1
PreferenceValue = Union[bool, int, float, str]


class Message(BaseModel):
    """
    One conversation turn. Frozen: a message never changes once appended.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Role
    content: str
    timestamp: int
    kind: MessageKind = Field(default="text", alias="messageType")


class MemoryProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    interests: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    communication_style: str = Field(default="", alias="communicationStyle")
    preferences: Dict[str, PreferenceValue] = Field(default_factory=dict)


class MemoryUpdate(BaseModel):
    """
    Partial MemoryProfile. Fields left as None are not touched by a merge.
    """
    model_config = ConfigDict(populate_by_name=True)

    interests: Optional[List[str]] = None
    goals: Optional[List[str]] = None
    communication_style: Optional[str] = Field(default=None, alias="communicationStyle")
    preferences: Optional[Dict[str, PreferenceValue]] = None


class DisplayInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int = Field(alias="chatId")
    user_id: int = Field(alias="userId")
    display_info: Optional[DisplayInfo] = Field(default=None, alias="displayInfo")
    history: List[Message] = Field(default_factory=list)
    memory: MemoryProfile = Field(default_factory=MemoryProfile, alias="userMemory")
    created_at: int = Field(alias="createdAt")
    last_activity: int = Field(alias="lastActivity")


class Statistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(default=0, alias="totalUsers")
    total_messages: int = Field(default=0, alias="totalMessages")
    last_reset: int = Field(alias="lastReset")


class Store(BaseModel):
    """
    Root aggregate persisted as a single JSON document.
    """
    model_config = ConfigDict(populate_by_name=True)

    sessions: Dict[int, Session] = Field(default_factory=dict, alias="users")
    statistics: Statistics

    @classmethod
    def empty(cls, now: int) -> "Store":
        return cls(sessions={}, statistics=Statistics(last_reset=now))

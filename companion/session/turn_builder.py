from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from companion.db.schemas import MemoryProfile, Message, PreferenceValue
from companion.llms.persona import PersonaDocument
from companion.llms.prompt_registry import get_prompt

TurnRole = Literal["user", "model"]

_ROLE_MAP = {"user": "user", "assistant": "model"}


@dataclass(frozen=True)
class PromptTurn:
    role: TurnRole
    text: str


def _render_value(value: PreferenceValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_memory_context(memory: MemoryProfile) -> str:
    """
    One clause per non-empty field, joined with "; ".
    """
    parts: List[str] = []
    if memory.interests:
        parts.append(f"Interests: {', '.join(memory.interests)}")
    if memory.goals:
        parts.append(f"Goals: {', '.join(memory.goals)}")
    if memory.communication_style:
        parts.append(f"Communication style: {memory.communication_style}")
    if memory.preferences:
        prefs = ", ".join(f"{k}: {_render_value(v)}" for k, v in memory.preferences.items())
        parts.append(f"Preferences: {prefs}")
    return "; ".join(parts)


def build_instruction_block(
    persona: Optional[PersonaDocument] = None,
    memory: Optional[MemoryProfile] = None,
    *,
    enable_memory: bool = True,
) -> str:
    paragraphs: List[str] = [(persona.persona if persona and persona.persona else get_prompt("default_persona"))]
    if persona is not None:
        if persona.tone:
            paragraphs.append(f"Tone: {persona.tone}")
        if persona.style:
            paragraphs.append(f"Style: {persona.style}")
        if persona.instructions:
            numbered = "\n".join(f"{i}. {line}" for i, line in enumerate(persona.instructions, start=1))
            paragraphs.append(f"Instructions:\n{numbered}")

    if memory is not None and enable_memory:
        context = build_memory_context(memory)
        if context:
            paragraphs.append(f"User context: {context}")

    return "\n\n".join(paragraphs)


def assemble_prompt(
    history: Sequence[Message],
    memory: Optional[MemoryProfile] = None,
    persona: Optional[PersonaDocument] = None,
    *,
    enable_memory: bool = True,
) -> List[PromptTurn]:
    """
    Build the ordered turns sent to the generation backend.

    The instruction block goes out as a user turn followed by a fixed model
    acknowledgment, standing in for a system role the backend may not have.
    System messages from history are skipped. Pure: no I/O, no hidden state.
    """
    turns: List[PromptTurn] = [
        PromptTurn(role="user", text=build_instruction_block(persona, memory, enable_memory=enable_memory)),
        PromptTurn(role="model", text=get_prompt("acknowledgment")),
    ]
    for m in history:
        if m.role == "system":
            continue
        turns.append(PromptTurn(role=_ROLE_MAP[m.role], text=m.content))
    return turns

"""
Tests for prompt assembly
"""

from companion.db.schemas import MemoryProfile, Message
from companion.llms.persona import PersonaDocument
from companion.llms.prompt_registry import get_prompt
from companion.session.turn_builder import (
    PromptTurn,
    assemble_prompt,
    build_instruction_block,
    build_memory_context,
)


def _history():
    return [
        Message(role="system", content="seed", timestamp=1),
        Message(role="user", content="hi", timestamp=2),
        Message(role="assistant", content="hello", timestamp=3),
        Message(role="user", content="how are you?", timestamp=4),
    ]


def _memory():
    return MemoryProfile(
        interests=["sobriety", "recovery"],
        goals=["sleep better"],
        communication_style="therapeutic_support",
        preferences={"tone": "calm", "crisis_support": True},
    )


class TestAssemblePrompt:
    def test_shape_and_role_mapping(self):
        turns = assemble_prompt(_history())

        assert [t.role for t in turns] == ["user", "model", "user", "model", "user"]
        assert turns[0].text == get_prompt("default_persona")
        assert turns[1] == PromptTurn(role="model", text=get_prompt("acknowledgment"))
        assert [t.text for t in turns[2:]] == ["hi", "hello", "how are you?"]

    def test_system_messages_are_skipped(self):
        turns = assemble_prompt(_history())

        assert all("seed" not in t.text for t in turns)

    def test_memory_rendered_into_opening_block(self):
        turns = assemble_prompt(_history(), _memory())

        assert turns[0].text == (
            get_prompt("default_persona")
            + "\n\nUser context: Interests: sobriety, recovery; Goals: sleep better; "
            "Communication style: therapeutic_support; Preferences: tone: calm, crisis_support: true"
        )

    def test_memory_disabled(self):
        turns = assemble_prompt(_history(), _memory(), enable_memory=False)

        assert "User context" not in turns[0].text

    def test_empty_memory_adds_nothing(self):
        turns = assemble_prompt(_history(), MemoryProfile())

        assert turns[0].text == get_prompt("default_persona")

    def test_persona_paragraphs_in_order(self):
        persona = PersonaDocument(
            persona="You are a recovery companion.",
            tone="warm",
            style="short sentences",
            instructions=["Ask one question at a time", "Never diagnose"],
        )

        block = build_instruction_block(persona)

        assert block == (
            "You are a recovery companion.\n\n"
            "Tone: warm\n\n"
            "Style: short sentences\n\n"
            "Instructions:\n1. Ask one question at a time\n2. Never diagnose"
        )

    def test_persona_without_text_uses_default(self):
        block = build_instruction_block(PersonaDocument(tone="warm"))

        assert block == get_prompt("default_persona") + "\n\nTone: warm"

    def test_deterministic(self):
        persona = PersonaDocument(persona="p", instructions=["a"])

        first = assemble_prompt(_history(), _memory(), persona)
        second = assemble_prompt(_history(), _memory(), persona)

        assert first == second

    def test_only_system_history(self):
        turns = assemble_prompt([Message(role="system", content="seed", timestamp=1)])

        assert len(turns) == 2


class TestMemoryContext:
    def test_only_present_fields(self):
        ctx = build_memory_context(MemoryProfile(goals=["a", "b"]))

        assert ctx == "Goals: a, b"

    def test_preference_scalars(self):
        ctx = build_memory_context(MemoryProfile(preferences={"n": 3, "x": 0.5, "ok": False}))

        assert ctx == "Preferences: n: 3, x: 0.5, ok: false"

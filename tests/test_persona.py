"""
Tests for persona document loading
"""

import json

import pytest

from companion.app.errors import ConfigError
from companion.llms.persona import PersonaDocument, load_persona
from companion.llms.prompt_registry import get_prompt


class TestLoadPersona:
    def test_missing_file_gives_defaults(self, tmp_path):
        doc = load_persona(tmp_path / "prompt.json")

        assert doc == PersonaDocument()

    def test_full_document(self, tmp_path):
        path = tmp_path / "prompt.json"
        path.write_text(
            json.dumps(
                {
                    "persona": "You are a calm companion.",
                    "tone": "warm",
                    "style": "simple words",
                    "instructions": ["  Listen first ", "", "Be brief"],
                    "response_templates": {"greeting": "Hey there"},
                    "unused_key": 1,
                }
            ),
            encoding="utf-8",
        )

        doc = load_persona(path)

        assert doc.persona == "You are a calm companion."
        assert doc.instructions == ["Listen first", "Be brief"]
        assert doc.template("greeting") == "Hey there"

    def test_invalid_json_is_config_error(self, tmp_path):
        path = tmp_path / "prompt.json"
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_persona(path)

    def test_wrong_types_are_config_error(self, tmp_path):
        path = tmp_path / "prompt.json"
        path.write_text(json.dumps({"response_templates": ["not", "a", "map"]}), encoding="utf-8")

        with pytest.raises(ConfigError):
            load_persona(path)


class TestTemplates:
    def test_falls_back_to_builtin(self):
        assert PersonaDocument().template("reset") == get_prompt("reset")

    def test_unknown_template_raises(self):
        with pytest.raises(KeyError):
            PersonaDocument().template("nope")

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from companion.app.errors import ConfigError
from companion.core.utils import clean_strings
from companion.llms.prompt_registry import get_prompt

logger = logging.getLogger(__name__)


class PersonaDocument(BaseModel):
    """
    Persona/style document authored outside the code (prompt.json).
    Loaded once at startup; unknown keys are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    persona: Optional[str] = None
    tone: Optional[str] = None
    style: Optional[str] = None
    instructions: List[str] = Field(default_factory=list)
    response_templates: Dict[str, str] = Field(default_factory=dict)

    @field_validator("instructions", mode="before")
    @classmethod
    def _normalize_instructions(cls, v):
        return clean_strings(v)

    def template(self, name: str) -> str:
        """Response template from the document, falling back to the built-in text."""
        return self.response_templates.get(name) or get_prompt(name)


def load_persona(path: Union[str, Path]) -> PersonaDocument:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Persona document not found, using defaults", extra={"path": str(p)})
        return PersonaDocument()
    except OSError as e:
        raise ConfigError(f"Cannot read persona document {p}: {e}") from e

    try:
        doc = PersonaDocument.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid persona document {p}: {e}") from e

    logger.info("Persona document loaded", extra={"path": str(p), "instructions": len(doc.instructions)})
    return doc

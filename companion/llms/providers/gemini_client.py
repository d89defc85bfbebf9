# companion/llms/providers/gemini_client.py
from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING, List, Optional, Sequence

from google import genai
from google.genai import types

from companion.app.errors import ConfigError, GenerationError
from companion.llms.prompt_registry import get_prompt

if TYPE_CHECKING:
    from companion.session.turn_builder import PromptTurn

logger = logging.getLogger(__name__)

IMAGE_MIME = "image/jpeg"


class GeminiChatClient:
    """
    Chat wrapper around the google-genai SDK.
    Takes assembled prompt turns and returns the reply text.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = "gemini-2.5-flash",
        max_tokens: int = 4000,
        temperature: float = 0.7,
        enable_image_recognition: bool = False,
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY must be set")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.enable_image_recognition = enable_image_recognition
        self.client = genai.Client(api_key=self.api_key)

    def _config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            max_output_tokens=self.max_tokens,
            temperature=self.temperature,
        )

    def _to_contents(self, turns: Sequence["PromptTurn"]) -> List[types.Content]:
        return [
            types.Content(role=t.role, parts=[types.Part.from_text(text=t.text)])
            for t in turns
        ]

    def _call(self, contents: List[types.Content]) -> str:
        try:
            resp = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=self._config(),
            )
        except Exception as e:
            logger.error("Gemini API error", extra={"error": str(e)})
            raise GenerationError(f"Generation backend error: {e}") from e
        return resp.text or ""

    def generate_reply(self, turns: Sequence["PromptTurn"], image: Optional[bytes] = None) -> str:
        """
        Text requests send the whole turn sequence. With an image (and image
        recognition enabled) only the latest turn's text goes out, next to the
        inline image.
        """
        if not turns:
            raise GenerationError("No message to process")

        started = time.monotonic()
        has_image = image is not None and self.enable_image_recognition
        if has_image:
            contents = [
                types.Content(
                    role="user",
                    parts=[
                        types.Part.from_text(text=turns[-1].text),
                        types.Part.from_bytes(data=image, mime_type=IMAGE_MIME),
                    ],
                )
            ]
        else:
            contents = self._to_contents(turns)

        text = self._call(contents)
        logger.info(
            "Gemini response generated",
            extra={
                "processing_ms": int((time.monotonic() - started) * 1000),
                "response_length": len(text),
                "has_image": has_image,
            },
        )
        return text

    def analyze_image(self, image: bytes, prompt: Optional[str] = None) -> str:
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt or get_prompt("image_analysis")),
                    types.Part.from_bytes(data=image, mime_type=IMAGE_MIME),
                ],
            )
        ]
        return self._call(contents)

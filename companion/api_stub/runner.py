from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from companion.app.errors import AppError
from companion.app.logging import log_bot_response, log_command, log_user_message, setup_logging
from companion.app.settings import Settings, load_settings
from companion.db.json_store import JsonStore
from companion.db.schemas import MemoryProfile, MemoryUpdate, Message, Statistics
from companion.llms.persona import PersonaDocument, load_persona
from companion.llms.prompt_registry import get_prompt
from companion.llms.providers.gemini_client import GeminiChatClient
from companion.session.session_manager import SessionManager
from companion.session.sweeper import SweepScheduler
from companion.session.turn_builder import assemble_prompt

logger = logging.getLogger(__name__)

IMAGE_PLACEHOLDER = "[Image sent]"

BUTTONS = ("support", "sobriety", "stats", "reset", "like", "dislike")


class CompanionRunner:
    """
    One method per inbound event. The transport adapter calls these with the
    chat/user ids and sends back whatever text they return.

    Core failures are logged and turned into a generic apology here; nothing
    below this layer formats user-facing text.
    """

    def __init__(
        self,
        settings: Settings,
        manager: SessionManager,
        llm: GeminiChatClient,
        persona: Optional[PersonaDocument] = None,
    ):
        self.settings = settings
        self.manager = manager
        self.llm = llm
        self.persona = persona or PersonaDocument()
        self.sweeper = SweepScheduler(
            manager,
            interval=timedelta(hours=settings.sweep_interval_hours),
            max_idle=timedelta(days=settings.inactivity_days),
        )

    # ---------- Commands ----------
    def start(self, chat_id: int, user_id: int, display_info: Optional[Dict[str, Any]] = None) -> str:
        try:
            self.manager.get_or_create_session(chat_id, user_id, display_info)
        except AppError:
            logger.error("start command failed", extra={"user_id": user_id}, exc_info=True)
            return get_prompt("apology")
        log_command(logger, user_id, "start")
        return self.persona.template("greeting")

    def help(self, user_id: int) -> str:
        log_command(logger, user_id, "help")
        return self.persona.template("help")

    def reset(self, user_id: int) -> str:
        try:
            with self.manager.user_lock(user_id):
                self.manager.clear_history(user_id)
        except AppError:
            logger.error("reset command failed", extra={"user_id": user_id}, exc_info=True)
            return get_prompt("apology")
        log_command(logger, user_id, "reset")
        return self.persona.template("reset")

    def set_persona(self, user_id: int, persona: str) -> str:
        try:
            with self.manager.user_lock(user_id):
                self.manager.update_memory(user_id, MemoryUpdate(communication_style=persona))
        except AppError:
            logger.error("persona command failed", extra={"user_id": user_id}, exc_info=True)
            return get_prompt("apology")
        log_command(logger, user_id, "persona", [persona])
        return get_prompt("persona_changed").format(persona=persona)

    def memory_view(self, user_id: int) -> Optional[MemoryProfile]:
        memory = self.manager.get_memory(user_id)
        log_command(logger, user_id, "memory")
        return memory

    def statistics(self, user_id: Optional[int] = None) -> Statistics:
        stats = self.manager.get_statistics()
        if user_id is not None:
            log_command(logger, user_id, "stats")
        return stats

    def handle_button(self, chat_id: int, user_id: int, data: str) -> Optional[str]:
        """
        Inline button presses. Returns the reply text, or None for unknown data.
        """
        if data not in BUTTONS:
            logger.warning("Unknown button data", extra={"user_id": user_id, "data": data})
            return None
        try:
            if data == "reset":
                with self.manager.user_lock(user_id):
                    self.manager.clear_history(user_id)
            elif data == "stats":
                stats = self.manager.get_statistics()
                return get_prompt("button_stats").format(total_messages=stats.total_messages)
        except AppError:
            logger.error("button handling failed", extra={"user_id": user_id, "data": data}, exc_info=True)
            return get_prompt("apology")
        finally:
            log_command(logger, user_id, "button", [data])
        return get_prompt(f"button_{data}")

    # ---------- Messages ----------
    def _exchange(self, user_id: int, message: Message, image: Optional[bytes] = None) -> str:
        """
        Append the user message, generate from the assembled prompt, append the
        reply. Caller holds the user's lock.
        """
        self.manager.append_message(user_id, message)
        turns = assemble_prompt(
            self.manager.get_history(user_id),
            self.manager.get_memory(user_id),
            self.persona,
            enable_memory=self.settings.enable_user_memory,
        )
        started = time.monotonic()
        reply = self.llm.generate_reply(turns, image=image)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        self.manager.append_message(
            user_id, Message(role="assistant", content=reply, timestamp=self.manager.clock())
        )
        log_bot_response(logger, user_id, reply, elapsed_ms)
        return reply

    def handle_text(
        self,
        chat_id: int,
        user_id: int,
        text: str,
        display_info: Optional[Dict[str, Any]] = None,
    ) -> str:
        log_user_message(logger, user_id, text)
        try:
            with self.manager.user_lock(user_id):
                self.manager.get_or_create_session(chat_id, user_id, display_info)
                return self._exchange(
                    user_id,
                    Message(role="user", content=text, timestamp=self.manager.clock(), kind="text"),
                )
        except AppError:
            logger.error("text message handling failed", extra={"user_id": user_id}, exc_info=True)
            return get_prompt("apology")

    def handle_image(
        self,
        chat_id: int,
        user_id: int,
        image: bytes,
        display_info: Optional[Dict[str, Any]] = None,
        caption: Optional[str] = None,
    ) -> str:
        """
        A captioned image goes through the conversation like a text message,
        with the image attached. A bare image gets a standalone description.
        """
        log_user_message(logger, user_id, IMAGE_PLACEHOLDER, kind="image")
        try:
            with self.manager.user_lock(user_id):
                self.manager.get_or_create_session(chat_id, user_id, display_info)
                if caption:
                    return self._exchange(
                        user_id,
                        Message(role="user", content=caption, timestamp=self.manager.clock(), kind="image"),
                        image=image,
                    )

                analysis = self.llm.analyze_image(image)
                self.manager.append_message(
                    user_id,
                    Message(role="user", content=IMAGE_PLACEHOLDER, timestamp=self.manager.clock(), kind="image"),
                )
                self.manager.append_message(
                    user_id, Message(role="assistant", content=analysis, timestamp=self.manager.clock())
                )
        except AppError:
            logger.error("image handling failed", extra={"user_id": user_id}, exc_info=True)
            return get_prompt("apology")

        log_bot_response(logger, user_id, analysis, 0)
        return analysis

    def handle_voice(self, user_id: int) -> Optional[str]:
        """Voice is acknowledged only; there is no speech-to-text yet."""
        if not self.settings.enable_voice_recognition:
            return None
        log_user_message(logger, user_id, "", kind="voice")
        return get_prompt("voice_unsupported")


def build_runner(settings: Optional[Settings] = None) -> CompanionRunner:
    """
    Wire everything from the environment (.env included):
    - logging
    - JSON store + session manager (initialized)
    - persona document
    - Gemini client
    - recurring inactivity sweep (started)
    """
    load_dotenv()
    s = settings or load_settings()
    setup_logging(s.log_level, s.log_file)

    manager = SessionManager(JsonStore(s.store_path), max_history_length=s.max_history_length)
    manager.initialize()

    llm = GeminiChatClient(
        s.gemini_api_key,
        model=s.gemini_model,
        max_tokens=s.gemini_max_tokens,
        temperature=s.gemini_temperature,
        enable_image_recognition=s.enable_image_recognition,
    )
    runner = CompanionRunner(s, manager, llm, load_persona(s.persona_path))
    runner.sweeper.start()
    logger.info(
        "Companion runner ready",
        extra={"model": s.gemini_model, "max_history": s.max_history_length},
    )
    return runner

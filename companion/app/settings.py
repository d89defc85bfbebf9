from __future__ import annotations
import os
from dataclasses import dataclass

from companion.app.errors import ConfigError

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _get_env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise ConfigError(f"Missing required env var: {name}")
    return v


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.lower().strip() in _TRUTHY


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    # Gemini
    gemini_api_key: str
    gemini_model: str
    gemini_max_tokens: int
    gemini_temperature: float

    # Bot behaviour
    max_history_length: int
    enable_image_recognition: bool
    enable_voice_recognition: bool
    enable_user_memory: bool

    # Storage / persona
    store_path: str
    persona_path: str

    # Inactivity sweep
    inactivity_days: int
    sweep_interval_hours: int

    # Logging
    log_level: str
    log_file: str | None


def load_settings() -> Settings:
    max_history = _get_int("MAX_HISTORY_LENGTH", 30)
    if max_history < 2:
        # one slot is reserved for the system message when trimming
        raise ConfigError(f"MAX_HISTORY_LENGTH must be at least 2, got {max_history}")

    inactivity_days = _get_int("INACTIVITY_DAYS", 30)
    sweep_interval = _get_int("SWEEP_INTERVAL_HOURS", 24)
    if inactivity_days <= 0 or sweep_interval <= 0:
        raise ConfigError("INACTIVITY_DAYS and SWEEP_INTERVAL_HOURS must be positive")

    return Settings(
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        gemini_max_tokens=_get_int("GEMINI_MAX_TOKENS", 4000),
        gemini_temperature=_get_float("GEMINI_TEMPERATURE", 0.7),
        max_history_length=max_history,
        enable_image_recognition=_get_bool("ENABLE_IMAGE_RECOGNITION", False),
        enable_voice_recognition=_get_bool("ENABLE_VOICE_RECOGNITION", False),
        enable_user_memory=_get_bool("ENABLE_USER_MEMORY", True),
        store_path=os.getenv("STORE_PATH", os.path.join("data", "db.json")),
        persona_path=os.getenv("PERSONA_PATH", "prompt.json"),
        inactivity_days=inactivity_days,
        sweep_interval_hours=sweep_interval,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
    )

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

_PREVIEW_CHARS = 100


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    h = logging.StreamHandler()
    h.setFormatter(JsonFormatter())
    root.addHandler(h)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(JsonFormatter())
        root.addHandler(fh)


def preview(text: str, limit: int = _PREVIEW_CHARS) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def log_user_message(logger: logging.Logger, user_id: int, text: str, kind: str = "text") -> None:
    """Non-text payloads are logged as a [KIND] marker, never their content."""
    message = text if kind == "text" else f"[{kind.upper()}]"
    logger.info("User message", extra={"user_id": user_id, "text": message, "kind": kind})


def log_bot_response(logger: logging.Logger, user_id: int, response: str, processing_ms: int) -> None:
    logger.info(
        "Bot response",
        extra={"user_id": user_id, "response": preview(response), "processing_ms": processing_ms},
    )


def log_command(logger: logging.Logger, user_id: int, command: str, args: Optional[List[str]] = None) -> None:
    logger.info("Command executed", extra={"user_id": user_id, "command": command, "command_args": args or []})

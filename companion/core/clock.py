from __future__ import annotations
import time
from typing import Callable

# Every timestamp in the store is integer milliseconds since the epoch.
Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current wall-clock time in milliseconds."""
    return int(time.time() * 1000)

from __future__ import annotations

"""
Session layer:
- bounded history + memory profile helpers
- session lifecycle over the JSON store
- prompt turns assembled from a session
- recurring inactivity sweep
"""

from companion.session import memory, session_manager, sweeper, turn_builder

__all__ = [
    "memory",
    "session_manager",
    "sweeper",
    "turn_builder",
]

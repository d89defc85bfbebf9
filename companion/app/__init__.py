from __future__ import annotations

"""
Application-level utilities:
- settings
- logging
- error definitions
"""

from companion.app import errors, logging, settings

__all__ = [
    "errors",
    "logging",
    "settings",
]

from __future__ import annotations

"""
This module provides core functionality for the application.

It includes the millisecond clock and small general utilities.
"""

from companion.core import clock, utils

__all__ = [
    "clock",
    "utils",
]

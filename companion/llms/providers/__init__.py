from __future__ import annotations

"""
Providers (Gemini)
"""

from companion.llms.providers import gemini_client

__all__ = [
    "gemini_client",
]

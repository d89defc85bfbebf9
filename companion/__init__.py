from __future__ import annotations

"""
companion: session and context management for a conversational support bot.
"""

__version__ = "0.1.0"

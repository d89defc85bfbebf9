from __future__ import annotations

"""
Language-model side:
- built-in prompt texts
- persona/style document
- providers (Gemini)
"""

from companion.llms import persona, prompt_registry, providers

__all__ = [
    "persona",
    "prompt_registry",
    "providers",
]

from __future__ import annotations

"""
Transport-neutral entrypoint: one handler per inbound event type.
"""

from companion.api_stub import runner

__all__ = [
    "runner",
]

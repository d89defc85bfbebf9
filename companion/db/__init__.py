from __future__ import annotations

"""
Storage layer:
- Schemas (Store aggregate and its parts)
- JSON document store
"""

from companion.db import json_store, schemas

__all__ = [
    "json_store",
    "schemas",
]

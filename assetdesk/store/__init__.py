"""
Entity store package.

Usage:
    from assetdesk.store import build_entity_store

    store = build_entity_store(db)
    with store.transaction():
        department = store.create_department({"company_id": 1, "name": "IT"})
"""
from __future__ import annotations

from .base import EntityStore, validate_payload
from .factory import build_entity_store, get_memory_store, reset_memory_store
from .memory import MemoryEntityStore
from .sql import SqlEntityStore

__all__ = [
    "EntityStore",
    "MemoryEntityStore",
    "SqlEntityStore",
    "build_entity_store",
    "get_memory_store",
    "reset_memory_store",
    "validate_payload",
]

"""Factory functions for the configured entity store."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from assetdesk.core.config import settings
from assetdesk.db.session import SessionLocal

from .base import EntityStore
from .memory import MemoryEntityStore
from .sql import SqlEntityStore

logger = logging.getLogger(__name__)

_memory_store: MemoryEntityStore | None = None


def get_memory_store() -> MemoryEntityStore:
    """Process-wide in-memory store (the memory back-end has no other persistence)."""
    global _memory_store
    if _memory_store is None:
        _memory_store = MemoryEntityStore()
        logger.info("In-memory entity store initialised")
    return _memory_store


def reset_memory_store() -> None:
    global _memory_store
    _memory_store = None


def build_entity_store(db: Session | None = None, backend: str | None = None) -> EntityStore:
    """
    Create the entity store selected by ``STORE_BACKEND``.

    Args:
        db: Session to bind a SQL store to; a new ``SessionLocal()`` is opened when omitted
        backend: Override for ``settings.STORE_BACKEND``

    Returns:
        Configured EntityStore instance
    """
    choice = (backend or settings.STORE_BACKEND).lower()
    if choice == "memory":
        return get_memory_store()
    if choice == "sql":
        return SqlEntityStore(db if db is not None else SessionLocal())
    raise ValueError(f"Unsupported store backend '{choice}'")

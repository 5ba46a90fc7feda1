"""In-memory adapters: entity graph store, TTL session cache, unit of work."""

from __future__ import annotations

from .cache import InMemorySessionCache
from .store import (
    InMemoryClientRepository,
    InMemoryEstateStore,
    InMemoryPersonRegistry,
    InMemoryRelationshipRepository,
    InMemoryUserRepository,
)
from .unit_of_work import InMemoryUnitOfWork

__all__ = [
    "InMemoryClientRepository",
    "InMemoryEstateStore",
    "InMemoryPersonRegistry",
    "InMemoryRelationshipRepository",
    "InMemorySessionCache",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
]

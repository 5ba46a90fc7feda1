"""Ports for holding a parsed-but-uncommitted import between steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from estate_import.domain.model import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from estate_import.domain.export import FieldTable


@runtime_checkable
class SessionCache(Protocol):
    """Transient key/value cache with per-key expiry."""

    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    def get(self, key: str) -> str | None: ...

    def delete(self, key: str) -> None: ...


@dataclass(slots=True, kw_only=True)
class ParseSession:
    session_id: str
    fields: FieldTable
    source: str | None = None
    created_at: datetime = field(default_factory=utcnow)


@runtime_checkable
class ParseSessionStore(Protocol):
    def save(self, session: ParseSession, *, ttl_seconds: int) -> None: ...

    def load(self, session_id: str) -> ParseSession | None:
        """Return the session, or None once it has expired or was discarded."""
        ...

    def discard(self, session_id: str) -> None: ...

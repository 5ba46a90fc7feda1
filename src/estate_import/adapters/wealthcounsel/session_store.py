"""Parse sessions kept in a key/value cache between parse and commit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from estate_import.adapters.wealthcounsel.schema import ParseSessionPayload

if TYPE_CHECKING:
    from estate_import.domain.ports import ParseSession, SessionCache

log = logging.getLogger(__name__)

KEY_PREFIX: Final = "wc_parse:"


def session_key(session_id: str) -> str:
    return f"{KEY_PREFIX}{session_id}"


class CachedParseSessionStore:
    """Store sessions as JSON payloads in any ``SessionCache``."""

    def __init__(self, cache: SessionCache) -> None:
        self.cache = cache

    def save(self, session: ParseSession, *, ttl_seconds: int) -> None:
        payload = ParseSessionPayload.from_session(session)
        self.cache.set(
            session_key(session.session_id),
            payload.model_dump_json(by_alias=True),
            ttl_seconds,
        )

    def load(self, session_id: str) -> ParseSession | None:
        raw = self.cache.get(session_key(session_id))
        if raw is None:
            return None
        try:
            payload = ParseSessionPayload.model_validate_json(raw)
        except ValidationError:
            log.warning("Discarding unreadable parse session %s", session_id)
            self.cache.delete(session_key(session_id))
            return None
        return payload.to_session()

    def discard(self, session_id: str) -> None:
        self.cache.delete(session_key(session_id))

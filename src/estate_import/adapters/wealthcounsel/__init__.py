"""WealthCounsel export adapter: markup parser, payload schemas, session store."""

from __future__ import annotations

from .parser import WealthCounselParser, parse_field_table
from .schema import ImportRequestPayload, ParseSessionPayload, PersonDecisionPayload
from .session_store import KEY_PREFIX, CachedParseSessionStore, session_key

__all__ = [
    "KEY_PREFIX",
    "CachedParseSessionStore",
    "ImportRequestPayload",
    "ParseSessionPayload",
    "PersonDecisionPayload",
    "WealthCounselParser",
    "parse_field_table",
    "session_key",
]

from __future__ import annotations

import logging

import pytest

from estate_import.adapters.memory import InMemorySessionCache
from estate_import.adapters.wealthcounsel import (
    KEY_PREFIX,
    CachedParseSessionStore,
    parse_field_table,
    session_key,
)
from estate_import.domain.export import FieldTable
from estate_import.domain.ports import ParseSession
from tests.fixtures.wealthcounsel import export_xml
from tests.helpers.estate import FakeClock


def _session(session_id: str = "abc123") -> ParseSession:
    return ParseSession(
        session_id=session_id,
        fields=FieldTable.from_dict({"Client name": "Sandra Lynn Jenkins"}),
        source="<wc:set/>",
    )


def test_session_key_prefix() -> None:
    assert KEY_PREFIX == "wc_parse:"
    assert session_key("abc123") == "wc_parse:abc123"


def test_save_and_load(
    session_store: CachedParseSessionStore, session_cache: InMemorySessionCache
) -> None:
    session_store.save(_session(), ttl_seconds=60)

    assert session_cache.get("wc_parse:abc123") is not None
    loaded = session_store.load("abc123")
    assert loaded is not None
    assert loaded.fields.text("Client name") == "Sandra Lynn Jenkins"
    assert loaded.source == "<wc:set/>"


def test_unknown_session_loads_as_none(session_store: CachedParseSessionStore) -> None:
    assert session_store.load("nope") is None


def test_session_expires_with_its_ttl(
    session_store: CachedParseSessionStore, clock: FakeClock
) -> None:
    session_store.save(_session(), ttl_seconds=60)

    clock.advance(59)
    assert session_store.load("abc123") is not None

    clock.advance(1)
    assert session_store.load("abc123") is None


def test_unreadable_payload_is_dropped(
    session_store: CachedParseSessionStore,
    session_cache: InMemorySessionCache,
    caplog: pytest.LogCaptureFixture,
) -> None:
    session_cache.set(session_key("broken"), "{not json", 60)

    with caplog.at_level(logging.WARNING):
        assert session_store.load("broken") is None

    assert "Discarding unreadable parse session broken" in caplog.text
    assert session_cache.get(session_key("broken")) is None


def test_discard(session_store: CachedParseSessionStore) -> None:
    session_store.save(_session(), ttl_seconds=60)

    session_store.discard("abc123")
    session_store.discard("abc123")

    assert session_store.load("abc123") is None


def test_non_finite_numbers_survive_the_round_trip(
    session_store: CachedParseSessionStore,
) -> None:
    fields = parse_field_table(
        export_xml(
            ("Client name", "string", "Sandra Lynn Jenkins"),
            ("Estate value", "number", "NaN"),
            ("Trust assets", "number", "Infinity"),
        )
    )
    session_store.save(
        ParseSession(session_id="odd-numbers", fields=fields, source="<wc:set/>"),
        ttl_seconds=60,
    )

    loaded = session_store.load("odd-numbers")

    assert loaded is not None
    assert loaded.fields.number("Estate value") == 0.0
    assert loaded.fields.number("Trust assets") == 0.0
    assert loaded.fields.text("Client name") == "Sandra Lynn Jenkins"

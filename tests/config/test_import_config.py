from __future__ import annotations

import pytest

from estate_import.config import ConfigurationError, ImportConfig, get_import_config


def test_import_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ESTATE_IMPORT_SESSION_TTL",
        "ESTATE_IMPORT_MATCH_LIMIT",
        "ESTATE_IMPORT_HIGH_CONFIDENCE",
    ):
        monkeypatch.delenv(name, raising=False)

    assert get_import_config() == ImportConfig()
    assert ImportConfig().session_ttl_seconds == 3600
    assert ImportConfig().match_limit == 5
    assert ImportConfig().high_confidence_threshold == 80


def test_import_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATE_IMPORT_SESSION_TTL", "60")
    monkeypatch.setenv("ESTATE_IMPORT_MATCH_LIMIT", "2")
    monkeypatch.setenv("ESTATE_IMPORT_HIGH_CONFIDENCE", "90")

    config = get_import_config()

    assert config == ImportConfig(
        session_ttl_seconds=60, match_limit=2, high_confidence_threshold=90
    )


def test_import_config_rejects_non_positive_ttl(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATE_IMPORT_SESSION_TTL", "0")

    with pytest.raises(ConfigurationError):
        get_import_config()

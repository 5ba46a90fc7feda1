"""Defaults for the export import workflow."""

from __future__ import annotations

from dataclasses import dataclass

from .env import positive_int_env

DEFAULT_SESSION_TTL_SECONDS = 3600
DEFAULT_MATCH_LIMIT = 5
DEFAULT_HIGH_CONFIDENCE_THRESHOLD = 80


@dataclass(frozen=True, slots=True)
class ImportConfig:
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    match_limit: int = DEFAULT_MATCH_LIMIT
    high_confidence_threshold: int = DEFAULT_HIGH_CONFIDENCE_THRESHOLD


def get_import_config() -> ImportConfig:
    return ImportConfig(
        session_ttl_seconds=positive_int_env(
            "ESTATE_IMPORT_SESSION_TTL", DEFAULT_SESSION_TTL_SECONDS
        ),
        match_limit=positive_int_env("ESTATE_IMPORT_MATCH_LIMIT", DEFAULT_MATCH_LIMIT),
        high_confidence_threshold=positive_int_env(
            "ESTATE_IMPORT_HIGH_CONFIDENCE", DEFAULT_HIGH_CONFIDENCE_THRESHOLD
        ),
    )

"""Discover people named in an export and match them against the registry."""

from __future__ import annotations

from .collect import collect_people
from .contracts import (
    DEFAULT_SCORES,
    ConfidenceScores,
    ExtractedPerson,
    MatchCandidate,
    MatchField,
    MatchType,
    PersonQuery,
    PersonTag,
)
from .extractor import PersonExtractor
from .scoring import (
    best_match,
    confidence_label,
    find_matches,
    format_match_type,
    has_exact_match,
    is_high_confidence,
    rank_candidates,
    score_candidate,
)

__all__ = [
    "DEFAULT_SCORES",
    "ConfidenceScores",
    "ExtractedPerson",
    "MatchCandidate",
    "MatchField",
    "MatchType",
    "PersonExtractor",
    "PersonQuery",
    "PersonTag",
    "best_match",
    "collect_people",
    "confidence_label",
    "find_matches",
    "format_match_type",
    "has_exact_match",
    "is_high_confidence",
    "rank_candidates",
    "score_candidate",
]

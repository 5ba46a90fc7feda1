"""Confidence scoring of extracted people against the person registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from estate_import.domain.matching.contracts import (
    DEFAULT_SCORES,
    ConfidenceScores,
    MatchCandidate,
    MatchField,
    MatchType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from estate_import.domain.matching.contracts import PersonQuery
    from estate_import.domain.model import Person
    from estate_import.domain.ports import PersonRegistry

log = logging.getLogger(__name__)

DEFAULT_MATCH_LIMIT: Final = 5
HIGH_CONFIDENCE_THRESHOLD: Final = 80

_MATCH_TYPE_LABELS: Final[dict[MatchType, str]] = {
    MatchType.SSN: "SSN Match",
    MatchType.NAME_EMAIL: "Name & Email",
    MatchType.NAME_DOB: "Name & Date of Birth",
    MatchType.EMAIL_ONLY: "Email Only",
    MatchType.NAME_ONLY: "Name Only",
}


def score_candidate(
    query: PersonQuery,
    person: Person,
    scores: ConfidenceScores = DEFAULT_SCORES,
) -> MatchCandidate | None:
    """Score one registry person; None when nothing useful matches.

    The first decisive tier wins: SSN, then name+email, name+dob, email alone,
    name alone. A date of birth without a name or email match is not enough.
    """

    person_name = person.display_name
    name_matches = bool(query.name) and (
        person.full_name == query.name or person_name.lower() == (query.name or "").lower()
    )
    email_matches = bool(query.email and person.email) and (
        (person.email or "").lower() == (query.email or "").lower()
    )
    person_dob = person.date_of_birth.isoformat() if person.date_of_birth else None
    dob_matches = bool(query.date_of_birth) and person_dob == query.date_of_birth
    ssn_matches = bool(query.ssn and person.ssn_last4) and (
        (query.ssn or "")[-4:] == person.ssn_last4
    )

    matching: list[MatchField] = []
    if name_matches:
        matching.append(MatchField.NAME)
    if email_matches:
        matching.append(MatchField.EMAIL)
    if dob_matches:
        matching.append(MatchField.DATE_OF_BIRTH)
    if ssn_matches:
        matching.append(MatchField.SSN)

    if ssn_matches:
        match_type = MatchType.SSN
    elif name_matches and email_matches:
        match_type = MatchType.NAME_EMAIL
    elif name_matches and dob_matches:
        match_type = MatchType.NAME_DOB
    elif email_matches:
        match_type = MatchType.EMAIL_ONLY
    elif name_matches:
        match_type = MatchType.NAME_ONLY
    else:
        return None

    return MatchCandidate(
        person_id=person.id,
        person_name=person_name,
        email=person.email,
        date_of_birth=person_dob,
        match_type=match_type,
        confidence=scores.for_type(match_type),
        matching_fields=tuple(matching),
    )


def rank_candidates(
    candidates: Iterable[MatchCandidate],
    *,
    limit: int = DEFAULT_MATCH_LIMIT,
    min_confidence: int = 0,
) -> list[MatchCandidate]:
    kept = [candidate for candidate in candidates if candidate.confidence >= min_confidence]
    kept.sort(key=lambda candidate: candidate.confidence, reverse=True)
    return kept[:limit]


def find_matches(
    registry: PersonRegistry,
    query: PersonQuery,
    *,
    limit: int = DEFAULT_MATCH_LIMIT,
    min_confidence: int = 0,
    scores: ConfidenceScores = DEFAULT_SCORES,
) -> list[MatchCandidate]:
    """Look the query up in the registry and return ranked candidates."""

    if not query.name and not query.email:
        return []
    people = registry.find_by_attributes(name=query.name, email=query.email)
    scored = (score_candidate(query, person, scores) for person in people)
    ranked = rank_candidates(
        (candidate for candidate in scored if candidate is not None),
        limit=limit,
        min_confidence=min_confidence,
    )
    log.debug(
        "Matched %r against %d registry people: %d candidates",
        query.name,
        len(people),
        len(ranked),
    )
    return ranked


def is_high_confidence(
    candidate: MatchCandidate, threshold: int = HIGH_CONFIDENCE_THRESHOLD
) -> bool:
    return candidate.confidence >= threshold


def has_exact_match(
    candidates: Iterable[MatchCandidate], scores: ConfidenceScores = DEFAULT_SCORES
) -> bool:
    return any(
        candidate.match_type is MatchType.SSN
        or (
            candidate.match_type is MatchType.NAME_EMAIL
            and candidate.confidence >= scores.name_email
        )
        for candidate in candidates
    )


def best_match(candidates: list[MatchCandidate]) -> MatchCandidate | None:
    """Candidates arrive ranked, so the best one is the first."""
    return candidates[0] if candidates else None


def format_match_type(match_type: MatchType) -> str:
    return _MATCH_TYPE_LABELS[match_type]


def confidence_label(confidence: int) -> str:
    if confidence >= 85:
        return "high"
    if confidence >= 60:
        return "medium"
    return "low"

from __future__ import annotations

from datetime import date

import pytest

from estate_import.adapters.memory import InMemoryEstateStore
from estate_import.domain.matching import (
    ConfidenceScores,
    MatchField,
    MatchType,
    PersonQuery,
    best_match,
    confidence_label,
    find_matches,
    format_match_type,
    has_exact_match,
    is_high_confidence,
    rank_candidates,
    score_candidate,
)
from estate_import.domain.model import Person
from tests.helpers.estate import make_person


@pytest.fixture
def sandra() -> Person:
    return make_person(
        "Sandra Lynn Jenkins",
        email="sandra@example.com",
        date_of_birth=date(1960, 5, 15),
        ssn_last4="6789",
    )


def test_ssn_match_wins(sandra: Person) -> None:
    query = PersonQuery(name="Sandra Lynn Jenkins", email="sandra@example.com", ssn="123-45-6789")

    candidate = score_candidate(query, sandra)

    assert candidate is not None
    assert candidate.match_type is MatchType.SSN
    assert candidate.confidence == 100
    assert candidate.matching_fields == (MatchField.NAME, MatchField.EMAIL, MatchField.SSN)
    assert candidate.person_id == sandra.id
    assert candidate.date_of_birth == "1960-05-15"


def test_name_and_email_match(sandra: Person) -> None:
    candidate = score_candidate(
        PersonQuery(name="Sandra Lynn Jenkins", email="SANDRA@example.com"), sandra
    )

    assert candidate is not None
    assert candidate.match_type is MatchType.NAME_EMAIL
    assert candidate.confidence == 90


def test_name_and_date_of_birth_match(sandra: Person) -> None:
    candidate = score_candidate(
        PersonQuery(name="sandra lynn jenkins", date_of_birth="1960-05-15"), sandra
    )

    assert candidate is not None
    assert candidate.match_type is MatchType.NAME_DOB
    assert candidate.confidence == 75
    assert candidate.matching_fields == (MatchField.NAME, MatchField.DATE_OF_BIRTH)


def test_email_only_match(sandra: Person) -> None:
    candidate = score_candidate(
        PersonQuery(name="Sandy Jenkins", email="sandra@example.com"), sandra
    )

    assert candidate is not None
    assert candidate.match_type is MatchType.EMAIL_ONLY
    assert candidate.confidence == 70


def test_name_only_match(sandra: Person) -> None:
    candidate = score_candidate(PersonQuery(name="Sandra Lynn Jenkins"), sandra)

    assert candidate is not None
    assert candidate.match_type is MatchType.NAME_ONLY
    assert candidate.confidence == 60


def test_date_of_birth_alone_is_not_a_match(sandra: Person) -> None:
    query = PersonQuery(name="Someone Else", date_of_birth="1960-05-15")

    assert score_candidate(query, sandra) is None


def test_ssn_needs_a_stored_value() -> None:
    person = make_person("Pat Doe")

    candidate = score_candidate(PersonQuery(name="Pat Doe", ssn="111-22-3333"), person)

    assert candidate is not None
    assert candidate.match_type is MatchType.NAME_ONLY


def test_custom_scores(sandra: Person) -> None:
    scores = ConfidenceScores(name_only=50)

    candidate = score_candidate(PersonQuery(name="Sandra Lynn Jenkins"), sandra, scores)

    assert candidate is not None
    assert candidate.confidence == 50


def test_rank_candidates_orders_filters_and_limits(sandra: Person) -> None:
    other = make_person("Sandra Lynn Jenkins")
    third = make_person("Sandra Lynn Jenkins", email="sandra@example.com")
    candidates = [
        score_candidate(PersonQuery(name="Sandra Lynn Jenkins"), other),
        score_candidate(PersonQuery(name="Sandra Lynn Jenkins", ssn="6789"), sandra),
        score_candidate(
            PersonQuery(name="Sandra Lynn Jenkins", email="sandra@example.com"), third
        ),
    ]
    scored = [candidate for candidate in candidates if candidate is not None]

    ranked = rank_candidates(scored, limit=2)
    assert [candidate.confidence for candidate in ranked] == [100, 90]

    assert [c.confidence for c in rank_candidates(scored, min_confidence=70)] == [100, 90]


def test_find_matches_uses_registry() -> None:
    store = InMemoryEstateStore()
    match = make_person("Sandra Lynn Jenkins", email="sandra@example.com")
    by_email = make_person("Sandy J", email="sandra@example.com")
    unrelated = make_person("Other Person", email="other@example.com")
    for person in (match, by_email, unrelated):
        store.add_person(person)

    candidates = find_matches(
        store.people, PersonQuery(name="Sandra Lynn Jenkins", email="sandra@example.com")
    )

    assert [candidate.person_id for candidate in candidates] == [match.id, by_email.id]
    assert [candidate.match_type for candidate in candidates] == [
        MatchType.NAME_EMAIL,
        MatchType.EMAIL_ONLY,
    ]


def test_find_matches_needs_name_or_email() -> None:
    store = InMemoryEstateStore()
    store.add_person(make_person("Sandra Lynn Jenkins"))

    assert find_matches(store.people, PersonQuery(date_of_birth="1960-05-15")) == []


def test_confidence_helpers(sandra: Person) -> None:
    strong = score_candidate(PersonQuery(name="Sandra Lynn Jenkins", ssn="6789"), sandra)
    weak = score_candidate(PersonQuery(name="Sandra Lynn Jenkins"), sandra)
    assert strong is not None
    assert weak is not None

    assert is_high_confidence(strong) is True
    assert is_high_confidence(weak) is False
    assert is_high_confidence(weak, threshold=60) is True
    assert has_exact_match([weak, strong]) is True
    assert has_exact_match([weak]) is False
    assert best_match([strong, weak]) is strong
    assert best_match([]) is None


def test_labels() -> None:
    assert format_match_type(MatchType.NAME_DOB) == "Name & Date of Birth"
    assert format_match_type(MatchType.SSN) == "SSN Match"
    assert confidence_label(90) == "high"
    assert confidence_label(70) == "medium"
    assert confidence_label(40) == "low"

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from estate_import.adapters.memory import InMemoryEstateStore, InMemoryUnitOfWork
from estate_import.adapters.wealthcounsel import CachedParseSessionStore
from estate_import.app import decide_people, import_export, preview_export
from estate_import.config import ImportConfig
from estate_import.domain.matching import (
    ExtractedPerson,
    MatchCandidate,
    MatchField,
    MatchType,
    PersonTag,
)
from estate_import.domain.transform import CreateNew, ImportOptions, UseExisting
from tests.fixtures.wealthcounsel import JOINT_TRUST_XML, SINGLE_CLIENT_WILL_XML
from tests.helpers.estate import make_person

type UnitOfWorkFactory = Callable[[], InMemoryUnitOfWork]


def _person(name: str, confidence: int | None = None) -> ExtractedPerson:
    person = ExtractedPerson(name=name, tag=PersonTag.FIDUCIARY)
    if confidence is not None:
        person.matches = [
            MatchCandidate(
                person_id=uuid4(),
                person_name=name,
                email=None,
                date_of_birth=None,
                match_type=MatchType.NAME_ONLY,
                confidence=confidence,
                matching_fields=(MatchField.NAME,),
            )
        ]
    return person


def test_decide_people_without_threshold_creates_everyone() -> None:
    people = [_person("Strong Match", 100), _person("No Match")]

    assert decide_people(people) == {"Strong Match": CreateNew(), "No Match": CreateNew()}


def test_decide_people_links_at_threshold() -> None:
    strong = _person("Strong Match", 90)
    weak = _person("Weak Match", 60)

    decisions = decide_people([strong, weak], link_threshold=80)

    assert decisions == {
        "Strong Match": UseExisting(strong.matches[0].person_id),
        "Weak Match": CreateNew(),
    }


def test_decide_people_explicit_decisions_win() -> None:
    strong = _person("Strong Match", 100)
    chosen = uuid4()

    decisions = decide_people(
        [strong, _person("Other")],
        overrides={"Strong Match": CreateNew(), "Other": UseExisting(chosen)},
        link_threshold=50,
    )

    assert decisions == {"Strong Match": CreateNew(), "Other": UseExisting(chosen)}


def test_preview_uses_configured_match_limit(
    memory_store: InMemoryEstateStore,
    memory_unit_of_work: UnitOfWorkFactory,
    session_store: CachedParseSessionStore,
) -> None:
    for _ in range(3):
        memory_store.add_person(make_person("Sandra Lynn Jenkins"))

    result = preview_export(
        SINGLE_CLIENT_WILL_XML,
        unit_of_work_factory=memory_unit_of_work,
        sessions=session_store,
        config=ImportConfig(match_limit=2),
    )

    client = result.people[0]
    assert client.name == "Sandra Lynn Jenkins"
    assert len(client.matches) == 2
    assert memory_store.counts()["plans"] == 0


def test_import_export_end_to_end(
    memory_store: InMemoryEstateStore,
    memory_unit_of_work: UnitOfWorkFactory,
    session_store: CachedParseSessionStore,
) -> None:
    matthew = make_person("Matthew James Christensen", email="matt@example.com")
    memory_store.add_person(matthew)

    result = import_export(
        JOINT_TRUST_XML,
        link_threshold=80,
        options=ImportOptions(create_client_records=True),
        unit_of_work_factory=memory_unit_of_work,
        sessions=session_store,
        config=ImportConfig(session_ttl_seconds=60),
    )

    assert result.success
    assert result.people_linked == 1
    assert result.people_created == 4
    assert result.clients_created == 2
    assert result.roles_created == 11
    assert memory_store.counts()["people"] == 5
    assert result.plan_id is not None
    plan = memory_store.get_plan(result.plan_id)
    assert plan is not None
    assert plan.grantor_person_id_1 == matthew.id

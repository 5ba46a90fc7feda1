from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from estate_import.domain.model import (
    ALLOWED_TRANSITIONS,
    EntityType,
    EstatePlan,
    Person,
    PlanEventType,
    PlanRole,
    PlanStatus,
    PlanStatusError,
    PlanType,
    Relationship,
    RoleCategory,
    RoleType,
    category_for,
)

AT = datetime(2025, 1, 2, 3, 4, tzinfo=UTC)


def _plan(status: PlanStatus = PlanStatus.DRAFT) -> EstatePlan:
    return EstatePlan(grantor_person_id_1=uuid4(), plan_type=PlanType.TRUST_BASED, status=status)


def test_allowed_transition_records_event() -> None:
    plan = _plan()

    event = plan.transition_to(PlanStatus.ACTIVE, at=AT, description="signed")

    assert plan.status is PlanStatus.ACTIVE
    assert plan.updated_at == AT
    assert event.plan_id == plan.id
    assert event.event_type is PlanEventType.PLAN_SIGNED
    assert event.event_date == AT
    assert event.description == "signed"


def test_disallowed_transition_raises() -> None:
    plan = _plan()

    with pytest.raises(PlanStatusError) as excinfo:
        plan.transition_to(PlanStatus.DISTRIBUTED)

    assert excinfo.value.current is PlanStatus.DRAFT
    assert excinfo.value.requested is PlanStatus.DISTRIBUTED
    assert plan.status is PlanStatus.DRAFT


@pytest.mark.parametrize("target", list(PlanStatus))
def test_closed_is_terminal(target: PlanStatus) -> None:
    plan = _plan(PlanStatus.CLOSED)

    assert not plan.can_transition_to(target)
    assert ALLOWED_TRANSITIONS[PlanStatus.CLOSED] == frozenset()


def test_lifecycle_path_to_closed() -> None:
    plan = _plan()

    for status in (
        PlanStatus.ACTIVE,
        PlanStatus.INCAPACITATED,
        PlanStatus.ADMINISTERED,
        PlanStatus.DISTRIBUTED,
        PlanStatus.CLOSED,
    ):
        plan.transition_to(status)

    assert plan.status is PlanStatus.CLOSED


def test_amend_can_repeat() -> None:
    plan = _plan(PlanStatus.ACTIVE)

    plan.amend(at=AT)
    event = plan.amend(at=AT)

    assert plan.current_version == 3
    assert plan.status is PlanStatus.AMENDED
    assert plan.last_amended_at == AT
    assert event.event_type is PlanEventType.PLAN_AMENDED


def test_plan_version_starts_at_one() -> None:
    with pytest.raises(ValueError, match="current_version"):
        EstatePlan(grantor_person_id_1=uuid4(), plan_type=PlanType.WILL_BASED, current_version=0)


def test_plan_role_defaults_category() -> None:
    role = PlanRole(plan_id=uuid4(), person_id=uuid4(), role_type=RoleType.GUARDIAN_OF_ESTATE)

    assert role.role_category is RoleCategory.GUARDIAN
    assert role.entity_type is EntityType.PLAN_ROLE
    assert category_for(RoleType.SUCCESSOR_TRUSTEE) is RoleCategory.FIDUCIARY
    assert category_for(RoleType.TESTATOR) is RoleCategory.GRANTOR


@pytest.mark.parametrize(
    "kwargs", [{"ordinal": 0}, {"share_percentage": 101}, {"share_percentage": -1}]
)
def test_plan_role_rejects_bad_values(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        PlanRole(plan_id=uuid4(), person_id=uuid4(), role_type=RoleType.TRUSTEE, **kwargs)


def test_person_display_name_and_ssn() -> None:
    person = Person(first_name="Jo", last_name="March")

    assert person.full_name == "Jo March"
    assert person.display_name == "Jo March"
    assert Person().display_name == ""

    with pytest.raises(ValueError, match="ssn_last4"):
        Person(full_name="Jo March", ssn_last4="12a4")


def test_relationship_type_must_not_be_blank() -> None:
    with pytest.raises(ValueError):
        Relationship(from_person_id=uuid4(), to_person_id=uuid4(), relationship_type="  ")


def test_entities_compare_by_identity() -> None:
    shared = uuid4()
    first = Person(id=shared, full_name="Same")
    second = Person(id=shared, full_name="Same")

    assert first != second
    assert first == first  # noqa: PLR0124

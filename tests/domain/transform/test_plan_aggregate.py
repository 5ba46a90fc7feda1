from __future__ import annotations

from datetime import UTC, date, datetime
from uuid import uuid4

import pytest

from estate_import.domain.model import (
    AncillaryDocumentType,
    EstatePlan,
    PlanEventType,
    PlanStatus,
    PlanStatusError,
    PlanType,
    TrustType,
    VersionChangeType,
    WillType,
)
from estate_import.domain.transform import (
    amend_plan,
    build_plan_aggregate,
    effective_date_for,
    map_trust_type,
    plan_name_for,
)
from tests.fixtures.wealthcounsel import JOINT_TRUST_XML, SINGLE_CLIENT_WILL_XML, export_xml
from tests.helpers.exports import parsed

AT = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        (None, TrustType.REVOCABLE_LIVING),
        ("Revocable Living Trust", TrustType.REVOCABLE_LIVING),
        ("SNT", TrustType.SPECIAL_NEEDS),
        ("Irrevocable Life Insurance Trust", TrustType.ILIT),
        ("Something Bespoke", TrustType.OTHER),
    ],
)
def test_map_trust_type(label: str | None, expected: TrustType) -> None:
    assert map_trust_type(label) is expected


def test_plan_name_and_effective_date() -> None:
    joint = parsed(JOINT_TRUST_XML)
    single = parsed(SINGLE_CLIENT_WILL_XML)

    assert plan_name_for(joint) == "Christensen Legacy Family Trust"
    assert plan_name_for(single) == "Sandra Lynn Jenkins Estate Plan"
    assert effective_date_for(joint) == date(2023, 1, 10)
    # the execution date reads as an impossible day-first date
    assert effective_date_for(single) is None


def test_unusable_trust_sign_date_falls_back_to_will_execution() -> None:
    export = parsed(
        export_xml(
            ("Client name", "string", "Dana Whitfield"),
            ("RLT trust name", "string", "Whitfield Family Trust"),
            ("Trust sign date", "date", "01/15/2024"),
            ("Will execution date", "date", "20/02/2024"),
        )
    )

    assert effective_date_for(export) == date(2024, 2, 20)


def test_will_based_aggregate() -> None:
    client_id = uuid4()

    aggregate = build_plan_aggregate(
        parsed(SINGLE_CLIENT_WILL_XML), client_person_id=client_id, at=AT
    )

    plan = aggregate.plan
    assert plan.plan_type is PlanType.WILL_BASED
    assert plan.status is PlanStatus.DRAFT
    assert plan.current_version == 1
    assert plan.grantor_ids == (client_id,)
    assert plan.external_client_id == "11111111111111111111"
    assert plan.created_at == AT
    assert aggregate.trust is None
    assert len(aggregate.wills) == 1
    will = aggregate.wills[0]
    assert will.person_id == client_id
    assert will.will_type is WillType.SIMPLE
    assert will.pour_over_trust_id is None
    assert aggregate.documents == []
    assert aggregate.version.version == 1
    assert aggregate.version.change_type is VersionChangeType.CREATION
    assert aggregate.version.change_summary == "Will created"
    assert aggregate.event.event_type is PlanEventType.PLAN_CREATED


def test_joint_trust_aggregate() -> None:
    client_id = uuid4()
    spouse_id = uuid4()

    aggregate = build_plan_aggregate(
        parsed(JOINT_TRUST_XML),
        client_person_id=client_id,
        spouse_person_id=spouse_id,
        source_markup="<wc:set/>",
        at=AT,
    )

    plan = aggregate.plan
    assert plan.status is PlanStatus.ACTIVE
    assert plan.effective_date == date(2023, 1, 10)
    assert plan.is_joint is True
    assert plan.grantor_ids == (client_id, spouse_id)

    trust = aggregate.trust
    assert trust is not None
    assert trust.plan_id == plan.id
    assert trust.trust_type is TrustType.REVOCABLE_LIVING
    assert trust.is_joint is True
    assert trust.is_revocable is True
    assert trust.formation_date == date(2023, 1, 10)
    assert trust.trust_settings == {"MC RLT Trust Type": "Revocable Living Trust"}

    assert aggregate.wills == []
    assert sorted((d.person_id == client_id, d.document_type) for d in aggregate.documents) == [
        (False, AncillaryDocumentType.FINANCIAL_POA),
        (False, AncillaryDocumentType.HEALTHCARE_POA),
        (True, AncillaryDocumentType.FINANCIAL_POA),
        (True, AncillaryDocumentType.HEALTHCARE_POA),
        (True, AncillaryDocumentType.NOMINATION_OF_GUARDIAN),
    ]
    assert aggregate.version.change_summary == "Trust created"
    assert aggregate.version.source_markup == "<wc:set/>"


def test_amend_plan_bumps_version() -> None:
    plan = EstatePlan(grantor_person_id_1=uuid4(), plan_type=PlanType.TRUST_BASED)
    plan.transition_to(PlanStatus.ACTIVE, at=AT)

    version, event = amend_plan(plan, parsed(JOINT_TRUST_XML), at=AT)

    assert plan.status is PlanStatus.AMENDED
    assert plan.current_version == 2
    assert plan.last_amended_at == AT
    assert version.version == 2
    assert version.plan_id == plan.id
    assert version.change_type is VersionChangeType.AMENDMENT
    assert version.change_summary == "Trust amended"
    assert event.event_type is PlanEventType.PLAN_AMENDED


def test_amend_plan_rejects_closed_plans() -> None:
    plan = EstatePlan(
        grantor_person_id_1=uuid4(), plan_type=PlanType.WILL_BASED, status=PlanStatus.CLOSED
    )

    with pytest.raises(PlanStatusError):
        amend_plan(plan, parsed(SINGLE_CLIENT_WILL_XML), at=AT)

    assert plan.current_version == 1

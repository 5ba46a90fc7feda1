from __future__ import annotations

from uuid import uuid4

import pytest

from estate_import.adapters.memory import InMemoryEstateStore
from estate_import.domain.integrity import (
    IdentityViolation,
    InvariantViolation,
    PlanAggregateViolation,
    RelationshipViolation,
    ensure_ancillary_document,
    ensure_client,
    ensure_plan,
    ensure_plan_role,
    ensure_relationship,
    ensure_trust,
    ensure_user,
    ensure_will,
)
from estate_import.domain.model import (
    AncillaryDocument,
    AncillaryDocumentType,
    Client,
    EntityType,
    EstatePlan,
    PlanRole,
    PlanType,
    Relationship,
    RoleType,
    Trust,
    User,
    Will,
)
from tests.helpers.estate import make_person, seed_plan


@pytest.fixture
def store() -> InMemoryEstateStore:
    return InMemoryEstateStore()


def test_user_requires_person_reference(store: InMemoryEstateStore) -> None:
    user = User(email="staff@example.com")

    with pytest.raises(IdentityViolation) as excinfo:
        ensure_user(user, store.people)

    error = excinfo.value
    assert error.entity_type is EntityType.USER
    assert error.field_name == "person_id"
    assert error.referenced_id is None
    assert str(error).startswith("Identity invariant violated: person reference is required")


def test_user_requires_existing_person(store: InMemoryEstateStore) -> None:
    missing = uuid4()

    with pytest.raises(IdentityViolation) as excinfo:
        ensure_user(User(person_id=missing, email="staff@example.com"), store.people)

    assert excinfo.value.referenced_id == missing


def test_user_with_existing_person_passes(store: InMemoryEstateStore) -> None:
    person = make_person("Staff Member")
    store.add_person(person)

    ensure_user(User(person_id=person.id, email="staff@example.com"), store.people)


def test_client_referrer_must_exist(store: InMemoryEstateStore) -> None:
    person = make_person("Client Person")
    store.add_person(person)
    client = Client(person_id=person.id, referred_by_person_id=uuid4())

    with pytest.raises(RelationshipViolation) as excinfo:
        ensure_client(client, store.people)

    assert excinfo.value.field_name == "referred_by_person_id"


def test_relationship_endpoints_must_exist(store: InMemoryEstateStore) -> None:
    person = make_person("Parent Person")
    store.add_person(person)
    relationship = Relationship(
        from_person_id=person.id, to_person_id=uuid4(), relationship_type="CHILD"
    )

    with pytest.raises(RelationshipViolation) as excinfo:
        ensure_relationship(relationship, store.people)

    assert excinfo.value.field_name == "to_person_id"


def test_plan_second_grantor_must_exist(store: InMemoryEstateStore) -> None:
    grantor = make_person("First Grantor")
    store.add_person(grantor)
    plan = EstatePlan(
        grantor_person_id_1=grantor.id,
        grantor_person_id_2=uuid4(),
        plan_type=PlanType.TRUST_BASED,
    )

    with pytest.raises(IdentityViolation) as excinfo:
        ensure_plan(plan, store.people)

    assert excinfo.value.field_name == "grantor_person_id_2"


def test_trust_needs_existing_plan(store: InMemoryEstateStore) -> None:
    with pytest.raises(PlanAggregateViolation):
        ensure_trust(Trust(plan_id=uuid4(), trust_name="Orphan Trust"), store)

    with pytest.raises(PlanAggregateViolation, match="plan reference is required"):
        ensure_trust(Trust(trust_name="Unattached Trust"), store)


def test_will_pour_over_trust_must_share_plan(store: InMemoryEstateStore) -> None:
    grantor, plan = seed_plan(store.people, store)
    _, other_plan = seed_plan(store.people, store, grantor_name="Other Grantor")
    foreign_trust = Trust(plan_id=other_plan.id, trust_name="Other Trust")
    store.add_trust(foreign_trust)
    will = Will(plan_id=plan.id, person_id=grantor.id, pour_over_trust_id=foreign_trust.id)

    with pytest.raises(PlanAggregateViolation, match="different plan") as excinfo:
        ensure_will(will, store, store.people)

    assert excinfo.value.field_name == "pour_over_trust_id"
    assert excinfo.value.referenced_id == foreign_trust.id


def test_ancillary_document_needs_a_person(store: InMemoryEstateStore) -> None:
    _, plan = seed_plan(store.people, store)
    document = AncillaryDocument(
        plan_id=plan.id, document_type=AncillaryDocumentType.FINANCIAL_POA
    )

    with pytest.raises(IdentityViolation):
        ensure_ancillary_document(document, store, store.people)


def test_plan_role_references(store: InMemoryEstateStore) -> None:
    grantor, plan = seed_plan(store.people, store)
    trust = Trust(plan_id=plan.id, trust_name="Family Trust")
    store.add_trust(trust)

    ensure_plan_role(
        PlanRole(
            plan_id=plan.id,
            person_id=grantor.id,
            trust_id=trust.id,
            role_type=RoleType.TRUSTEE,
        ),
        store,
        store.people,
    )

    with pytest.raises(IdentityViolation) as excinfo:
        ensure_plan_role(
            PlanRole(
                plan_id=plan.id,
                person_id=grantor.id,
                for_person_id=uuid4(),
                role_type=RoleType.FINANCIAL_AGENT,
            ),
            store,
            store.people,
        )
    assert excinfo.value.field_name == "for_person_id"

    with pytest.raises(PlanAggregateViolation) as excinfo_doc:
        ensure_plan_role(
            PlanRole(
                plan_id=plan.id,
                person_id=grantor.id,
                ancillary_document_id=uuid4(),
                role_type=RoleType.HEALTHCARE_AGENT,
            ),
            store,
            store.people,
        )
    assert excinfo_doc.value.field_name == "ancillary_document_id"


def test_violations_share_a_base() -> None:
    for error_type in (IdentityViolation, RelationshipViolation, PlanAggregateViolation):
        assert issubclass(error_type, InvariantViolation)
        assert issubclass(error_type, ValueError)

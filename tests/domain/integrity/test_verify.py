from __future__ import annotations

from uuid import uuid4

from estate_import.adapters.memory import InMemoryEstateStore
from estate_import.domain.integrity import verify_client, verify_plan
from estate_import.domain.model import Client, PlanRole, RoleType, Trust
from tests.helpers.estate import make_person, seed_plan


def test_verify_plan_accepts_valid_graph() -> None:
    store = InMemoryEstateStore()
    grantor, plan = seed_plan(store.people, store)
    trust = Trust(plan_id=plan.id, trust_name="Family Trust")
    store.add_trust(trust)
    store.add_role(
        PlanRole(plan_id=plan.id, person_id=grantor.id, role_type=RoleType.GRANTOR)
    )

    report = verify_plan(plan.id, store, store.people)

    assert report.valid
    assert report.subject_id == plan.id


def test_verify_plan_reports_missing_plan() -> None:
    store = InMemoryEstateStore()
    missing = uuid4()

    report = verify_plan(missing, store, store.people)

    assert not report.valid
    assert report.issues == [f"plan {missing} does not exist"]


def test_verify_plan_reports_broken_references() -> None:
    store = InMemoryEstateStore()
    grantor, plan = seed_plan(store.people, store)
    role = PlanRole(plan_id=plan.id, person_id=grantor.id, role_type=RoleType.TRUSTEE)
    store.add_role(role)

    # corrupt the stored record after it passed the creation guard
    role.person_id = uuid4()
    report = store.verify_plan(plan.id)

    assert not report.valid
    assert any("referenced person does not exist" in issue for issue in report.issues)


def test_verify_plan_reports_duplicate_roles() -> None:
    store = InMemoryEstateStore()
    grantor, plan = seed_plan(store.people, store)
    for ordinal in (1, 2):
        store.add_role(
            PlanRole(
                plan_id=plan.id,
                person_id=grantor.id,
                role_type=RoleType.TRUSTEE,
                ordinal=ordinal,
            )
        )

    report = verify_plan(plan.id, store, store.people)

    assert len(report.issues) == 1
    assert report.issues[0].startswith("duplicate role TRUSTEE")


def test_verify_client() -> None:
    store = InMemoryEstateStore()
    person = make_person("Client Person")
    store.add_person(person)
    client = Client(person_id=person.id)
    store.add_client(client)

    assert verify_client(client, client.id, store.people).valid
    assert store.verify_client(client.id).valid

    missing = uuid4()
    report = store.verify_client(missing)
    assert report.issues == [f"client {missing} does not exist"]

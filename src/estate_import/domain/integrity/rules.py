"""Creation-time guards for the estate entity graph.

Each ``ensure_*`` function checks one record against whatever is already
stored and raises the matching ``InvariantViolation`` subclass. Guards only
read; they never write or mutate the record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from estate_import.domain.integrity.errors import (
    IdentityViolation,
    PlanAggregateViolation,
    RelationshipViolation,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from estate_import.domain.model import (
        AncillaryDocument,
        Client,
        Entity,
        EstatePlan,
        Person,
        PlanRole,
        Relationship,
        RoleKey,
        Trust,
        User,
        Will,
    )


class PersonLookup(Protocol):
    def get(self, person_id: UUID) -> Person | None: ...


class PlanLookup(Protocol):
    def get_plan(self, plan_id: UUID) -> EstatePlan | None: ...

    def get_trust(self, trust_id: UUID) -> Trust | None: ...

    def get_will(self, will_id: UUID) -> Will | None: ...

    def get_document(self, document_id: UUID) -> AncillaryDocument | None: ...


class PlanGraphLookup(PlanLookup, Protocol):
    """Read access to everything hanging off a plan, for verification."""

    def trusts_for_plan(self, plan_id: UUID) -> list[Trust]: ...

    def wills_for_plan(self, plan_id: UUID) -> list[Will]: ...

    def documents_for_plan(self, plan_id: UUID) -> list[AncillaryDocument]: ...

    def roles_for_plan(self, plan_id: UUID) -> list[PlanRole]: ...


def _require_person(
    people: PersonLookup,
    entity: Entity,
    field_name: str,
    person_id: UUID | None,
) -> None:
    if person_id is None:
        raise IdentityViolation(
            "person reference is required",
            entity_type=entity.entity_type,
            field_name=field_name,
        )
    if people.get(person_id) is None:
        raise IdentityViolation(
            "referenced person does not exist",
            entity_type=entity.entity_type,
            field_name=field_name,
            referenced_id=person_id,
        )


def _require_plan(plans: PlanLookup, entity: Entity, plan_id: UUID | None) -> None:
    if plan_id is None:
        raise PlanAggregateViolation(
            "plan reference is required",
            entity_type=entity.entity_type,
            field_name="plan_id",
        )
    if plans.get_plan(plan_id) is None:
        raise PlanAggregateViolation(
            "referenced plan does not exist",
            entity_type=entity.entity_type,
            field_name="plan_id",
            referenced_id=plan_id,
        )


def _require_same_plan(
    entity: Entity,
    field_name: str,
    referenced_id: UUID,
    target: Trust | Will | AncillaryDocument | None,
    plan_id: UUID | None,
) -> None:
    if target is None:
        raise PlanAggregateViolation(
            "referenced record does not exist",
            entity_type=entity.entity_type,
            field_name=field_name,
            referenced_id=referenced_id,
        )
    if target.plan_id != plan_id:
        raise PlanAggregateViolation(
            "referenced record belongs to a different plan",
            entity_type=entity.entity_type,
            field_name=field_name,
            referenced_id=referenced_id,
        )


def ensure_user(user: User, people: PersonLookup) -> None:
    _require_person(people, user, "person_id", user.person_id)


def ensure_client(client: Client, people: PersonLookup) -> None:
    _require_person(people, client, "person_id", client.person_id)
    referrer = client.referred_by_person_id
    if referrer is not None and people.get(referrer) is None:
        raise RelationshipViolation(
            "referring person does not exist",
            entity_type=client.entity_type,
            field_name="referred_by_person_id",
            referenced_id=referrer,
        )


def ensure_relationship(relationship: Relationship, people: PersonLookup) -> None:
    for field_name, person_id in (
        ("from_person_id", relationship.from_person_id),
        ("to_person_id", relationship.to_person_id),
    ):
        if person_id is None or people.get(person_id) is None:
            raise RelationshipViolation(
                "both endpoints must be existing people",
                entity_type=relationship.entity_type,
                field_name=field_name,
                referenced_id=person_id,
            )


def ensure_plan(plan: EstatePlan, people: PersonLookup) -> None:
    # grantors are a person-existence requirement, not a plan-specific one
    _require_person(people, plan, "grantor_person_id_1", plan.grantor_person_id_1)
    if plan.grantor_person_id_2 is not None:
        _require_person(people, plan, "grantor_person_id_2", plan.grantor_person_id_2)


def ensure_trust(trust: Trust, plans: PlanLookup) -> None:
    _require_plan(plans, trust, trust.plan_id)


def ensure_will(will: Will, plans: PlanLookup, people: PersonLookup) -> None:
    _require_plan(plans, will, will.plan_id)
    if will.person_id is not None:
        _require_person(people, will, "person_id", will.person_id)
    if will.pour_over_trust_id is not None:
        _require_same_plan(
            will,
            "pour_over_trust_id",
            will.pour_over_trust_id,
            plans.get_trust(will.pour_over_trust_id),
            will.plan_id,
        )


def ensure_ancillary_document(
    document: AncillaryDocument,
    plans: PlanLookup,
    people: PersonLookup,
) -> None:
    _require_plan(plans, document, document.plan_id)
    _require_person(people, document, "person_id", document.person_id)


def ensure_plan_role(role: PlanRole, plans: PlanLookup, people: PersonLookup) -> None:
    _require_plan(plans, role, role.plan_id)
    _require_person(people, role, "person_id", role.person_id)
    if role.for_person_id is not None:
        _require_person(people, role, "for_person_id", role.for_person_id)
    if role.trust_id is not None:
        _require_same_plan(
            role, "trust_id", role.trust_id, plans.get_trust(role.trust_id), role.plan_id
        )
    if role.will_id is not None:
        _require_same_plan(
            role, "will_id", role.will_id, plans.get_will(role.will_id), role.plan_id
        )
    if role.ancillary_document_id is not None:
        _require_same_plan(
            role,
            "ancillary_document_id",
            role.ancillary_document_id,
            plans.get_document(role.ancillary_document_id),
            role.plan_id,
        )


@dataclass(slots=True)
class IntegrityReport:
    """Outcome of re-checking stored records after the fact."""

    subject_id: UUID
    issues: list[str] = field(default_factory=list[str])

    @property
    def valid(self) -> bool:
        return not self.issues


def verify_client(client: Client | None, client_id: UUID, people: PersonLookup) -> IntegrityReport:
    report = IntegrityReport(client_id)
    if client is None:
        report.issues.append(f"client {client_id} does not exist")
        return report
    _collect(report, lambda: ensure_client(client, people))
    return report


def verify_plan(plan_id: UUID, plans: PlanGraphLookup, people: PersonLookup) -> IntegrityReport:
    """Re-run every guard over a stored plan and all of its children."""

    report = IntegrityReport(plan_id)
    plan = plans.get_plan(plan_id)
    if plan is None:
        report.issues.append(f"plan {plan_id} does not exist")
        return report

    _collect(report, lambda: ensure_plan(plan, people))
    for trust in plans.trusts_for_plan(plan_id):
        _collect(report, lambda trust=trust: ensure_trust(trust, plans))
    for will in plans.wills_for_plan(plan_id):
        _collect(report, lambda will=will: ensure_will(will, plans, people))
    for document in plans.documents_for_plan(plan_id):
        _collect(
            report, lambda document=document: ensure_ancillary_document(document, plans, people)
        )
    _collect_roles(report, plans.roles_for_plan(plan_id), plans, people)
    return report


def _collect_roles(
    report: IntegrityReport,
    roles: Iterable[PlanRole],
    plans: PlanLookup,
    people: PersonLookup,
) -> None:
    # roles repeat across versions; a duplicate is a repeat within one version
    seen: set[tuple[int, RoleKey]] = set()
    for role in roles:
        _collect(report, lambda role=role: ensure_plan_role(role, plans, people))
        key = (role.established_in_version, role.key)
        if key in seen:
            report.issues.append(
                f"duplicate role {role.role_type} for person {role.person_id}"
                f" in version {role.established_in_version}"
            )
        seen.add(key)


def _collect(report: IntegrityReport, check: Callable[[], None]) -> None:
    try:
        check()
    except (IdentityViolation, RelationshipViolation, PlanAggregateViolation) as exc:
        report.issues.append(str(exc))

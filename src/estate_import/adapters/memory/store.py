"""In-memory entity graph.

Every record lives in a flat collection keyed by its id, and references
between records are ids only. Inserts run the same creation guards as the
relational store, so an invalid record never enters the graph.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from estate_import.domain.integrity import (
    ensure_ancillary_document,
    ensure_client,
    ensure_plan,
    ensure_plan_role,
    ensure_relationship,
    ensure_trust,
    ensure_user,
    ensure_will,
    verify_client,
    verify_plan,
)

if TYPE_CHECKING:
    from uuid import UUID

    from estate_import.domain.integrity import IntegrityReport
    from estate_import.domain.model import (
        AncillaryDocument,
        Client,
        EstatePlan,
        Person,
        PlanEvent,
        PlanMatterLink,
        PlanRole,
        PlanVersion,
        Relationship,
        Trust,
        User,
        Will,
    )

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _Collections:
    people: dict[UUID, Person] = field(default_factory=dict["UUID", "Person"])
    users: dict[UUID, User] = field(default_factory=dict["UUID", "User"])
    clients: dict[UUID, Client] = field(default_factory=dict["UUID", "Client"])
    relationships: dict[UUID, Relationship] = field(
        default_factory=dict["UUID", "Relationship"]
    )
    plans: dict[UUID, EstatePlan] = field(default_factory=dict["UUID", "EstatePlan"])
    trusts: dict[UUID, Trust] = field(default_factory=dict["UUID", "Trust"])
    wills: dict[UUID, Will] = field(default_factory=dict["UUID", "Will"])
    documents: dict[UUID, AncillaryDocument] = field(
        default_factory=dict["UUID", "AncillaryDocument"]
    )
    roles: dict[UUID, PlanRole] = field(default_factory=dict["UUID", "PlanRole"])
    versions: dict[UUID, PlanVersion] = field(default_factory=dict["UUID", "PlanVersion"])
    events: dict[UUID, PlanEvent] = field(default_factory=dict["UUID", "PlanEvent"])
    matter_links: dict[UUID, PlanMatterLink] = field(
        default_factory=dict["UUID", "PlanMatterLink"]
    )


class InMemoryEstateStore:
    """Arena of id-keyed collections; also the ``PlanStore`` for the plan aggregate."""

    def __init__(self) -> None:
        self._data = _Collections()

    # snapshots -------------------------------------------------------------

    def snapshot(self) -> _Collections:
        return copy.deepcopy(self._data)

    def restore(self, snapshot: _Collections) -> None:
        self._data = copy.deepcopy(snapshot)

    def counts(self) -> dict[str, int]:
        return {
            "people": len(self._data.people),
            "users": len(self._data.users),
            "clients": len(self._data.clients),
            "relationships": len(self._data.relationships),
            "plans": len(self._data.plans),
            "trusts": len(self._data.trusts),
            "wills": len(self._data.wills),
            "documents": len(self._data.documents),
            "roles": len(self._data.roles),
            "versions": len(self._data.versions),
            "events": len(self._data.events),
            "matter_links": len(self._data.matter_links),
        }

    # people ----------------------------------------------------------------

    def add_person(self, person: Person) -> None:
        self._data.people[person.id] = person

    def get_person(self, person_id: UUID) -> Person | None:
        return self._data.people.get(person_id)

    def find_people(self, *, name: str | None = None, email: str | None = None) -> list[Person]:
        wanted_name = name.lower() if name else None
        wanted_email = email.lower() if email else None
        if wanted_name is None and wanted_email is None:
            return []
        return [
            person
            for person in self._data.people.values()
            if (wanted_name is not None and person.display_name.lower() == wanted_name)
            or (wanted_email is not None and (person.email or "").lower() == wanted_email)
        ]

    def add_user(self, user: User) -> None:
        ensure_user(user, self.people)
        self._data.users[user.id] = user

    def get_user(self, user_id: UUID) -> User | None:
        return self._data.users.get(user_id)

    def add_client(self, client: Client) -> None:
        ensure_client(client, self.people)
        self._data.clients[client.id] = client

    def get_client(self, client_id: UUID) -> Client | None:
        return self._data.clients.get(client_id)

    def client_for_person(self, person_id: UUID) -> Client | None:
        return next(
            (client for client in self._data.clients.values() if client.person_id == person_id),
            None,
        )

    def add_relationship(self, relationship: Relationship) -> None:
        ensure_relationship(relationship, self.people)
        self._data.relationships[relationship.id] = relationship

    def get_relationship(self, relationship_id: UUID) -> Relationship | None:
        return self._data.relationships.get(relationship_id)

    def relationships_for(self, person_id: UUID) -> list[Relationship]:
        found = [
            relationship
            for relationship in self._data.relationships.values()
            if person_id in (relationship.from_person_id, relationship.to_person_id)
        ]
        return sorted(found, key=lambda relationship: relationship.ordinal)

    @property
    def people(self) -> InMemoryPersonRegistry:
        return InMemoryPersonRegistry(self)

    # plan aggregate ----------------------------------------------------------

    def add_plan(self, plan: EstatePlan) -> None:
        ensure_plan(plan, self.people)
        self._data.plans[plan.id] = plan

    def update_plan(self, plan: EstatePlan) -> None:
        ensure_plan(plan, self.people)
        if plan.id not in self._data.plans:
            raise KeyError(plan.id)
        self._data.plans[plan.id] = plan

    def get_plan(self, plan_id: UUID) -> EstatePlan | None:
        return self._data.plans.get(plan_id)

    def plans_for_grantor(self, person_id: UUID, *, limit: int | None = None) -> list[EstatePlan]:
        plans = sorted(
            (plan for plan in self._data.plans.values() if person_id in plan.grantor_ids),
            key=lambda plan: plan.updated_at,
            reverse=True,
        )
        return plans if limit is None else plans[:limit]

    def add_trust(self, trust: Trust) -> None:
        ensure_trust(trust, self)
        self._data.trusts[trust.id] = trust

    def get_trust(self, trust_id: UUID) -> Trust | None:
        return self._data.trusts.get(trust_id)

    def trusts_for_plan(self, plan_id: UUID) -> list[Trust]:
        return [trust for trust in self._data.trusts.values() if trust.plan_id == plan_id]

    def add_will(self, will: Will) -> None:
        ensure_will(will, self, self.people)
        self._data.wills[will.id] = will

    def get_will(self, will_id: UUID) -> Will | None:
        return self._data.wills.get(will_id)

    def wills_for_plan(self, plan_id: UUID) -> list[Will]:
        return [will for will in self._data.wills.values() if will.plan_id == plan_id]

    def add_document(self, document: AncillaryDocument) -> None:
        ensure_ancillary_document(document, self, self.people)
        self._data.documents[document.id] = document

    def get_document(self, document_id: UUID) -> AncillaryDocument | None:
        return self._data.documents.get(document_id)

    def documents_for_plan(self, plan_id: UUID) -> list[AncillaryDocument]:
        return [
            document
            for document in self._data.documents.values()
            if document.plan_id == plan_id
        ]

    def add_role(self, role: PlanRole) -> None:
        ensure_plan_role(role, self, self.people)
        self._data.roles[role.id] = role

    def roles_for_plan(self, plan_id: UUID) -> list[PlanRole]:
        return [role for role in self._data.roles.values() if role.plan_id == plan_id]

    def add_version(self, version: PlanVersion) -> None:
        self._data.versions[version.id] = version

    def versions_for_plan(self, plan_id: UUID) -> list[PlanVersion]:
        versions = [v for v in self._data.versions.values() if v.plan_id == plan_id]
        return sorted(versions, key=lambda version: version.version)

    def add_event(self, event: PlanEvent) -> None:
        self._data.events[event.id] = event

    def events_for_plan(self, plan_id: UUID) -> list[PlanEvent]:
        events = [e for e in self._data.events.values() if e.plan_id == plan_id]
        return sorted(events, key=lambda event: event.event_date)

    def add_matter_link(self, link: PlanMatterLink) -> None:
        self._data.matter_links[link.id] = link

    def matter_links_for_plan(self, plan_id: UUID) -> list[PlanMatterLink]:
        return [link for link in self._data.matter_links.values() if link.plan_id == plan_id]

    # verification -----------------------------------------------------------

    def verify_client(self, client_id: UUID) -> IntegrityReport:
        return verify_client(self.get_client(client_id), client_id, self.people)

    def verify_plan(self, plan_id: UUID) -> IntegrityReport:
        report = verify_plan(plan_id, self, self.people)
        if not report.valid:
            log.warning("Plan %s has %d integrity issues", plan_id, len(report.issues))
        return report


class InMemoryPersonRegistry:
    def __init__(self, store: InMemoryEstateStore) -> None:
        self._store = store

    def add(self, entity: Person) -> None:
        self._store.add_person(entity)

    def get(self, entity_id: UUID) -> Person | None:
        return self._store.get_person(entity_id)

    def find_by_attributes(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
    ) -> list[Person]:
        return self._store.find_people(name=name, email=email)


class InMemoryUserRepository:
    def __init__(self, store: InMemoryEstateStore) -> None:
        self._store = store

    def add(self, entity: User) -> None:
        self._store.add_user(entity)

    def get(self, entity_id: UUID) -> User | None:
        return self._store.get_user(entity_id)


class InMemoryClientRepository:
    def __init__(self, store: InMemoryEstateStore) -> None:
        self._store = store

    def add(self, entity: Client) -> None:
        self._store.add_client(entity)

    def get(self, entity_id: UUID) -> Client | None:
        return self._store.get_client(entity_id)

    def get_by_person(self, person_id: UUID) -> Client | None:
        return self._store.client_for_person(person_id)


class InMemoryRelationshipRepository:
    def __init__(self, store: InMemoryEstateStore) -> None:
        self._store = store

    def add(self, entity: Relationship) -> None:
        self._store.add_relationship(entity)

    def get(self, entity_id: UUID) -> Relationship | None:
        return self._store.get_relationship(entity_id)

    def for_person(self, person_id: UUID) -> list[Relationship]:
        return self._store.relationships_for(person_id)


if TYPE_CHECKING:
    from estate_import.domain.ports import (
        ClientRepository,
        PersonRegistry,
        PlanStore,
        RelationshipRepository,
        UserRepository,
    )

    _store = InMemoryEstateStore()
    _plans_check: PlanStore = _store
    _people_check: PersonRegistry = InMemoryPersonRegistry(_store)
    _users_check: UserRepository = InMemoryUserRepository(_store)
    _clients_check: ClientRepository = InMemoryClientRepository(_store)
    _relationships_check: RelationshipRepository = InMemoryRelationshipRepository(_store)

"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select

from estate_import.adapters.sqlalchemy.mappings import (
    ancillary_document_table,
    client_table,
    estate_plan_table,
    person_table,
    plan_event_table,
    plan_role_table,
    plan_version_table,
    relationship_table,
    trust_table,
    will_table,
)
from estate_import.domain.integrity import (
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
    Client,
    EstatePlan,
    Person,
    PlanEvent,
    PlanRole,
    PlanVersion,
    Relationship,
    Trust,
    User,
    Will,
)

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from estate_import.domain.model import PlanMatterLink


class SqlAlchemyPersonRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Person) -> None:
        self.session.add(entity)
        self.session.flush()

    def get(self, entity_id: UUID) -> Person | None:
        return self.session.get(Person, entity_id)

    def find_by_attributes(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
    ) -> list[Person]:
        conditions: list[ColumnElement[bool]] = []
        if name:
            conditions.append(func.lower(person_table.c.full_name) == name.lower())
        if email:
            conditions.append(func.lower(person_table.c.email) == email.lower())
        if not conditions:
            return []
        stmt = select(Person).where(or_(*conditions)).order_by(person_table.c.created_at)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyUserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: User) -> None:
        ensure_user(entity, SqlAlchemyPersonRepository(self.session))
        self.session.add(entity)
        self.session.flush()

    def get(self, entity_id: UUID) -> User | None:
        return self.session.get(User, entity_id)


class SqlAlchemyClientRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Client) -> None:
        ensure_client(entity, SqlAlchemyPersonRepository(self.session))
        self.session.add(entity)
        self.session.flush()

    def get(self, entity_id: UUID) -> Client | None:
        return self.session.get(Client, entity_id)

    def get_by_person(self, person_id: UUID) -> Client | None:
        stmt = select(Client).where(client_table.c.person_id == person_id).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyRelationshipRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Relationship) -> None:
        ensure_relationship(entity, SqlAlchemyPersonRepository(self.session))
        self.session.add(entity)
        self.session.flush()

    def get(self, entity_id: UUID) -> Relationship | None:
        return self.session.get(Relationship, entity_id)

    def for_person(self, person_id: UUID) -> list[Relationship]:
        stmt = (
            select(Relationship)
            .where(
                or_(
                    relationship_table.c.from_person_id == person_id,
                    relationship_table.c.to_person_id == person_id,
                )
            )
            .order_by(relationship_table.c.ordinal)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyPlanStore:
    """Plan aggregate persistence; every insert re-checks its creation guard."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._people = SqlAlchemyPersonRepository(session)

    def _insert(self, entity: object) -> None:
        # flush so later guards in the same transaction can see the row
        self.session.add(entity)
        self.session.flush()

    def add_plan(self, plan: EstatePlan) -> None:
        ensure_plan(plan, self._people)
        self._insert(plan)

    def update_plan(self, plan: EstatePlan) -> None:
        ensure_plan(plan, self._people)
        self.session.merge(plan)
        self.session.flush()

    def get_plan(self, plan_id: UUID) -> EstatePlan | None:
        return self.session.get(EstatePlan, plan_id)

    def plans_for_grantor(self, person_id: UUID, *, limit: int | None = None) -> list[EstatePlan]:
        stmt = (
            select(EstatePlan)
            .where(
                or_(
                    estate_plan_table.c.grantor_person_id_1 == person_id,
                    estate_plan_table.c.grantor_person_id_2 == person_id,
                )
            )
            .order_by(estate_plan_table.c.updated_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars())

    def add_trust(self, trust: Trust) -> None:
        ensure_trust(trust, self)
        self._insert(trust)

    def get_trust(self, trust_id: UUID) -> Trust | None:
        return self.session.get(Trust, trust_id)

    def trusts_for_plan(self, plan_id: UUID) -> list[Trust]:
        stmt = (
            select(Trust)
            .where(trust_table.c.plan_id == plan_id)
            .order_by(trust_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def add_will(self, will: Will) -> None:
        ensure_will(will, self, self._people)
        self._insert(will)

    def get_will(self, will_id: UUID) -> Will | None:
        return self.session.get(Will, will_id)

    def wills_for_plan(self, plan_id: UUID) -> list[Will]:
        stmt = (
            select(Will).where(will_table.c.plan_id == plan_id).order_by(will_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def add_document(self, document: AncillaryDocument) -> None:
        ensure_ancillary_document(document, self, self._people)
        self._insert(document)

    def get_document(self, document_id: UUID) -> AncillaryDocument | None:
        return self.session.get(AncillaryDocument, document_id)

    def documents_for_plan(self, plan_id: UUID) -> list[AncillaryDocument]:
        stmt = (
            select(AncillaryDocument)
            .where(ancillary_document_table.c.plan_id == plan_id)
            .order_by(ancillary_document_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def add_role(self, role: PlanRole) -> None:
        ensure_plan_role(role, self, self._people)
        self._insert(role)

    def roles_for_plan(self, plan_id: UUID) -> list[PlanRole]:
        stmt = (
            select(PlanRole)
            .where(plan_role_table.c.plan_id == plan_id)
            .order_by(plan_role_table.c.role_type, plan_role_table.c.ordinal)
        )
        return list(self.session.execute(stmt).scalars())

    def add_version(self, version: PlanVersion) -> None:
        self._insert(version)

    def versions_for_plan(self, plan_id: UUID) -> list[PlanVersion]:
        stmt = (
            select(PlanVersion)
            .where(plan_version_table.c.plan_id == plan_id)
            .order_by(plan_version_table.c.version)
        )
        return list(self.session.execute(stmt).scalars())

    def add_event(self, event: PlanEvent) -> None:
        self._insert(event)

    def events_for_plan(self, plan_id: UUID) -> list[PlanEvent]:
        stmt = (
            select(PlanEvent)
            .where(plan_event_table.c.plan_id == plan_id)
            .order_by(plan_event_table.c.event_date)
        )
        return list(self.session.execute(stmt).scalars())

    def add_matter_link(self, link: PlanMatterLink) -> None:
        self._insert(link)

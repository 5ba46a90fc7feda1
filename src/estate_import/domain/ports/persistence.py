"""Ports for persisting people and estate plan aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from estate_import.domain.model import Client, Person, Relationship, User

if TYPE_CHECKING:
    from uuid import UUID

    from estate_import.domain.model import (
        AncillaryDocument,
        EstatePlan,
        PlanEvent,
        PlanMatterLink,
        PlanRole,
        PlanVersion,
        Trust,
        Will,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent entity store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class PersonRegistry(Repository[Person], Protocol):
    """The person registry every extracted name is reconciled against."""

    def find_by_attributes(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
    ) -> list[Person]:
        """People whose name or email match (OR semantics, case-insensitive)."""
        ...


@runtime_checkable
class UserRepository(Repository[User], Protocol):
    """Repository contract for users."""


@runtime_checkable
class ClientRepository(Repository[Client], Protocol):
    def get_by_person(self, person_id: UUID) -> Client | None: ...


@runtime_checkable
class RelationshipRepository(Repository[Relationship], Protocol):
    def for_person(self, person_id: UUID) -> list[Relationship]: ...


@runtime_checkable
class PlanStore(Protocol):
    """Insert/select/update for the plan aggregate, keyed by id."""

    def add_plan(self, plan: EstatePlan) -> None: ...

    def update_plan(self, plan: EstatePlan) -> None: ...

    def get_plan(self, plan_id: UUID) -> EstatePlan | None: ...

    def plans_for_grantor(self, person_id: UUID, *, limit: int | None = None) -> list[EstatePlan]:
        ...

    def add_trust(self, trust: Trust) -> None: ...

    def get_trust(self, trust_id: UUID) -> Trust | None: ...

    def trusts_for_plan(self, plan_id: UUID) -> list[Trust]: ...

    def add_will(self, will: Will) -> None: ...

    def get_will(self, will_id: UUID) -> Will | None: ...

    def wills_for_plan(self, plan_id: UUID) -> list[Will]: ...

    def add_document(self, document: AncillaryDocument) -> None: ...

    def get_document(self, document_id: UUID) -> AncillaryDocument | None: ...

    def documents_for_plan(self, plan_id: UUID) -> list[AncillaryDocument]: ...

    def add_role(self, role: PlanRole) -> None: ...

    def roles_for_plan(self, plan_id: UUID) -> list[PlanRole]: ...

    def add_version(self, version: PlanVersion) -> None: ...

    def versions_for_plan(self, plan_id: UUID) -> list[PlanVersion]: ...

    def add_event(self, event: PlanEvent) -> None: ...

    def events_for_plan(self, plan_id: UUID) -> list[PlanEvent]: ...

    def add_matter_link(self, link: PlanMatterLink) -> None: ...

"""Violations raised by the entity graph guards."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from uuid import UUID

    from estate_import.domain.model import EntityType


class InvariantViolation(ValueError):
    """Base for every structural rule a write can break."""

    prefix: ClassVar[str] = "Invariant violated"

    def __init__(
        self,
        message: str,
        *,
        entity_type: EntityType,
        field_name: str,
        referenced_id: UUID | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.field_name = field_name
        self.referenced_id = referenced_id
        super().__init__(
            f"{self.prefix}: {message} "
            f"(entity={entity_type.value}, field={field_name}, id={referenced_id})"
        )


class IdentityViolation(InvariantViolation):
    """A record points at a person that is missing or was never given."""

    prefix = "Identity invariant violated"


class RelationshipViolation(InvariantViolation):
    """A person-to-person link has an endpoint that does not exist."""

    prefix = "Relationship invariant violated"


class PlanAggregateViolation(InvariantViolation):
    """A plan child references a missing plan or another plan's records."""

    prefix = "Plan aggregate invariant violated"

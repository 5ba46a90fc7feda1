"""Estate plan aggregate: the plan root and the records hanging off it by id."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Final

from estate_import.domain.model.entity import Entity, TimestampedEntity, utcnow
from estate_import.domain.model.enums import (
    AncillaryDocumentType,
    DocumentStatus,
    EntityType,
    MatterRelationshipType,
    PlanEventType,
    PlanStatus,
    PlanType,
    RoleCategory,
    RoleStatus,
    RoleType,
    ShareType,
    TrustType,
    VersionChangeType,
    VersionSourceType,
    WillType,
    category_for,
)

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID


class PlanStatusError(ValueError):
    """Raised when a plan status change is not an allowed transition."""

    def __init__(self, *, current: PlanStatus, requested: PlanStatus) -> None:
        super().__init__(f"cannot move plan from {current} to {requested}")
        self.current = current
        self.requested = requested


_NON_TERMINAL_EXITS: Final = frozenset(
    {PlanStatus.AMENDED, PlanStatus.INCAPACITATED, PlanStatus.ADMINISTERED, PlanStatus.CLOSED}
)

ALLOWED_TRANSITIONS: Final[dict[PlanStatus, frozenset[PlanStatus]]] = {
    PlanStatus.DRAFT: frozenset({PlanStatus.ACTIVE, PlanStatus.AMENDED, PlanStatus.CLOSED}),
    PlanStatus.ACTIVE: _NON_TERMINAL_EXITS,
    PlanStatus.AMENDED: _NON_TERMINAL_EXITS,
    PlanStatus.INCAPACITATED: frozenset({PlanStatus.ADMINISTERED, PlanStatus.CLOSED}),
    PlanStatus.ADMINISTERED: frozenset({PlanStatus.DISTRIBUTED, PlanStatus.CLOSED}),
    PlanStatus.DISTRIBUTED: frozenset({PlanStatus.CLOSED}),
    PlanStatus.CLOSED: frozenset(),
}

_EVENT_FOR_STATUS: Final[dict[PlanStatus, PlanEventType]] = {
    PlanStatus.ACTIVE: PlanEventType.PLAN_SIGNED,
    PlanStatus.AMENDED: PlanEventType.PLAN_AMENDED,
    PlanStatus.INCAPACITATED: PlanEventType.GRANTOR_INCAPACITATED,
    PlanStatus.ADMINISTERED: PlanEventType.ADMINISTRATION_STARTED,
    PlanStatus.DISTRIBUTED: PlanEventType.FINAL_DISTRIBUTION,
    PlanStatus.CLOSED: PlanEventType.PLAN_CLOSED,
}


@dataclass(eq=False, kw_only=True)
class EstatePlan(TimestampedEntity):
    """Root aggregate. Joint plans name two grantors with equal standing."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ESTATE_PLAN

    grantor_person_id_1: UUID | None = None
    grantor_person_id_2: UUID | None = None
    plan_type: PlanType
    plan_name: str | None = None
    current_version: int = 1
    status: PlanStatus = PlanStatus.DRAFT
    effective_date: date | None = None
    last_amended_at: datetime | None = None
    external_client_id: str | None = None
    import_metadata: dict[str, object] | None = None

    def __post_init__(self) -> None:
        if self.current_version < 1:
            raise ValueError("current_version must start at 1")

    @property
    def grantor_ids(self) -> tuple[UUID, ...]:
        return tuple(
            grantor
            for grantor in (self.grantor_person_id_1, self.grantor_person_id_2)
            if grantor is not None
        )

    @property
    def is_joint(self) -> bool:
        return self.grantor_person_id_2 is not None

    def can_transition_to(self, status: PlanStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(
        self,
        status: PlanStatus,
        *,
        at: datetime | None = None,
        description: str | None = None,
    ) -> PlanEvent:
        """Move to ``status`` and return the event recording the change."""
        if not self.can_transition_to(status):
            raise PlanStatusError(current=self.status, requested=status)
        when = at or utcnow()
        self.status = status
        self.touch(when)
        return PlanEvent(
            plan_id=self.id,
            event_type=_EVENT_FOR_STATUS[status],
            event_date=when,
            description=description,
        )

    def amend(self, *, at: datetime | None = None, description: str | None = None) -> PlanEvent:
        """Bump the version counter and mark the plan AMENDED."""
        when = at or utcnow()
        event = self.transition_to(PlanStatus.AMENDED, at=when, description=description)
        self.current_version += 1
        self.last_amended_at = when
        return event


@dataclass(eq=False, kw_only=True)
class Trust(TimestampedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRUST

    plan_id: UUID | None = None
    trust_name: str
    trust_type: TrustType = TrustType.REVOCABLE_LIVING
    is_joint: bool = False
    is_revocable: bool = True
    jurisdiction: str | None = None
    formation_date: date | None = None
    external_trust_id: str | None = None
    trust_settings: dict[str, object] | None = None


@dataclass(eq=False, kw_only=True)
class Will(TimestampedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.WILL

    plan_id: UUID | None = None
    person_id: UUID | None = None
    will_type: WillType = WillType.SIMPLE
    execution_date: date | None = None
    jurisdiction: str | None = None
    pour_over_trust_id: UUID | None = None
    codicil_count: int = 0


@dataclass(eq=False, kw_only=True)
class AncillaryDocument(TimestampedEntity):
    """Per-principal document (power of attorney, directive, nomination)."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ANCILLARY_DOCUMENT

    plan_id: UUID | None = None
    person_id: UUID | None = None
    document_type: AncillaryDocumentType
    title: str | None = None
    status: DocumentStatus = DocumentStatus.DRAFT
    execution_date: date | None = None


type RoleKey = tuple[UUID | None, RoleType, UUID | None]


@dataclass(eq=False, kw_only=True)
class PlanRole(TimestampedEntity):
    """A person's capacity within a plan.

    ``for_person_id`` is None for plan-level roles and names the principal whose
    own document the role concerns otherwise.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PLAN_ROLE

    plan_id: UUID | None = None
    person_id: UUID | None = None
    for_person_id: UUID | None = None
    trust_id: UUID | None = None
    will_id: UUID | None = None
    ancillary_document_id: UUID | None = None
    role_type: RoleType
    role_category: RoleCategory | None = None
    is_primary: bool = False
    ordinal: int = 1
    share_percentage: int | None = None
    share_type: ShareType | None = None
    established_in_version: int = 1
    person_snapshot: dict[str, object] | None = None
    status: RoleStatus = RoleStatus.ACTIVE

    def __post_init__(self) -> None:
        if self.role_category is None:
            self.role_category = category_for(self.role_type)
        if self.ordinal < 1:
            raise ValueError("ordinal must be positive")
        if self.share_percentage is not None and not 0 <= self.share_percentage <= 100:
            raise ValueError("share_percentage must be between 0 and 100")

    @property
    def key(self) -> RoleKey:
        return (self.person_id, self.role_type, self.for_person_id)


@dataclass(eq=False, kw_only=True)
class PlanVersion(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PLAN_VERSION

    plan_id: UUID
    version: int
    change_type: VersionChangeType
    change_description: str | None = None
    change_summary: str | None = None
    effective_date: date | None = None
    source_type: VersionSourceType = VersionSourceType.WEALTHCOUNSEL
    source_markup: str | None = None
    source_data: dict[str, object] | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(eq=False, kw_only=True)
class PlanEvent(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PLAN_EVENT

    plan_id: UUID
    event_type: PlanEventType
    event_date: datetime = field(default_factory=utcnow)
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class PlanMatterLink(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PLAN_MATTER_LINK

    plan_id: UUID
    matter_id: str
    relationship_type: MatterRelationshipType = MatterRelationshipType.CREATION

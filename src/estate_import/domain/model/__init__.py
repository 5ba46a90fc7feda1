"""Public domain model surface."""

from __future__ import annotations

from estate_import.domain.model.entity import Entity, TimestampedEntity, new_id, utcnow
from estate_import.domain.model.enums import (
    ROLE_CATEGORY_BY_TYPE,
    AncillaryDocumentType,
    ClientStatus,
    DocumentStatus,
    EntityType,
    MatterRelationshipType,
    PersonType,
    PlanEventType,
    PlanStatus,
    PlanType,
    ReferralType,
    RelationshipContext,
    RoleCategory,
    RoleStatus,
    RoleType,
    ShareType,
    TrustType,
    UserRole,
    UserStatus,
    VersionChangeType,
    VersionSourceType,
    WillType,
    category_for,
)
from estate_import.domain.model.people import Client, Person, Relationship, User
from estate_import.domain.model.plan import (
    ALLOWED_TRANSITIONS,
    AncillaryDocument,
    EstatePlan,
    PlanEvent,
    PlanMatterLink,
    PlanRole,
    PlanStatusError,
    PlanVersion,
    RoleKey,
    Trust,
    Will,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "TimestampedEntity",
    "new_id",
    "utcnow",
    # people
    "Person",
    "User",
    "Client",
    "Relationship",
    # plan aggregate
    "EstatePlan",
    "Trust",
    "Will",
    "AncillaryDocument",
    "PlanRole",
    "RoleKey",
    "PlanVersion",
    "PlanEvent",
    "PlanMatterLink",
    "PlanStatusError",
    "ALLOWED_TRANSITIONS",
    # enums
    "EntityType",
    "PersonType",
    "UserRole",
    "UserStatus",
    "ClientStatus",
    "ReferralType",
    "RelationshipContext",
    "PlanType",
    "PlanStatus",
    "TrustType",
    "WillType",
    "AncillaryDocumentType",
    "DocumentStatus",
    "RoleCategory",
    "RoleType",
    "ROLE_CATEGORY_BY_TYPE",
    "category_for",
    "ShareType",
    "RoleStatus",
    "VersionChangeType",
    "VersionSourceType",
    "PlanEventType",
    "MatterRelationshipType",
]

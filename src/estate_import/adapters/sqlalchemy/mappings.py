"""SQLAlchemy mapping metadata for the estate plan model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from estate_import.domain.model import (
    AncillaryDocument,
    AncillaryDocumentType,
    Client,
    ClientStatus,
    DocumentStatus,
    EstatePlan,
    MatterRelationshipType,
    Person,
    PersonType,
    PlanEvent,
    PlanEventType,
    PlanMatterLink,
    PlanRole,
    PlanStatus,
    PlanType,
    PlanVersion,
    ReferralType,
    Relationship,
    RelationshipContext,
    RoleCategory,
    RoleStatus,
    RoleType,
    ShareType,
    Trust,
    TrustType,
    User,
    UserRole,
    UserStatus,
    VersionChangeType,
    VersionSourceType,
    Will,
    WillType,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JSONObjectType(TypeDecorator[dict[str, object]]):
    """Free-form metadata dicts stored as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(
        self, value: dict[str, object] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, sort_keys=True, default=str)

    def process_result_value(
        self, value: str | None, dialect: Dialect
    ) -> dict[str, object] | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return None
        return cast(dict[str, Any], loaded)


def _enum(enum_cls: type[StrEnum]) -> Enum:
    return Enum(enum_cls, native_enum=False, length=40)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Identity tables --------------------------------------------------------------

person_table = Table(
    "person",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("person_type", _enum(PersonType), nullable=False),
    Column("first_name", String, nullable=True),
    Column("last_name", String, nullable=True),
    Column("middle_name", String, nullable=True),
    Column("full_name", String, nullable=True),
    Column("email", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("address", String, nullable=True),
    Column("city", String, nullable=True),
    Column("state", String, nullable=True),
    Column("zip_code", String(10), nullable=True),
    Column("date_of_birth", Date, nullable=True),
    Column("ssn_last4", String(4), nullable=True),
    Column("notes", Text, nullable=True),
    Column("import_metadata", JSONObjectType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_person_full_name", "full_name"),
    Index("ix_person_email", "email"),
)

user_table = Table(
    "user",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "person_id", UUIDColumnType, ForeignKey("person.id"), nullable=False, unique=True
    ),
    Column("email", String, nullable=False, unique=True),
    Column("role", _enum(UserRole), nullable=False),
    Column("admin_level", Integer, nullable=False),
    Column("status", _enum(UserStatus), nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

client_table = Table(
    "client",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "person_id", UUIDColumnType, ForeignKey("person.id"), nullable=False, unique=True
    ),
    Column("status", _enum(ClientStatus), nullable=False),
    Column("has_minor_children", Boolean, nullable=True),
    Column("children_info", Text, nullable=True),
    Column("has_will", Boolean, nullable=True),
    Column("has_trust", Boolean, nullable=True),
    Column("referral_type", _enum(ReferralType), nullable=True),
    Column("referred_by_person_id", UUIDColumnType, ForeignKey("person.id"), nullable=True),
    Column("referral_notes", Text, nullable=True),
    Column("import_metadata", JSONObjectType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

relationship_table = Table(
    "relationship",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "from_person_id",
        UUIDColumnType,
        ForeignKey("person.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "to_person_id",
        UUIDColumnType,
        ForeignKey("person.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("relationship_type", String, nullable=False),
    Column("context", _enum(RelationshipContext), nullable=True),
    Column("context_id", String, nullable=True),
    Column("ordinal", Integer, nullable=False),
    Column("notes", Text, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_relationship_from_person_id", "from_person_id"),
    Index("ix_relationship_to_person_id", "to_person_id"),
)

# Plan aggregate tables --------------------------------------------------------

estate_plan_table = Table(
    "estate_plan",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("grantor_person_id_1", UUIDColumnType, ForeignKey("person.id"), nullable=False),
    Column("grantor_person_id_2", UUIDColumnType, ForeignKey("person.id"), nullable=True),
    Column("plan_type", _enum(PlanType), nullable=False),
    Column("plan_name", String, nullable=True),
    Column("current_version", Integer, nullable=False),
    Column("status", _enum(PlanStatus), nullable=False),
    Column("effective_date", Date, nullable=True),
    Column("last_amended_at", UTCDateTime, nullable=True),
    Column("external_client_id", String, nullable=True),
    Column("import_metadata", JSONObjectType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_estate_plan_grantor_person_id_1", "grantor_person_id_1"),
    Index("ix_estate_plan_grantor_person_id_2", "grantor_person_id_2"),
)

trust_table = Table(
    "trust",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("trust_name", String, nullable=False),
    Column("trust_type", _enum(TrustType), nullable=False),
    Column("is_joint", Boolean, nullable=False),
    Column("is_revocable", Boolean, nullable=False),
    Column("jurisdiction", String, nullable=True),
    Column("formation_date", Date, nullable=True),
    Column("external_trust_id", String, nullable=True),
    Column("trust_settings", JSONObjectType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

will_table = Table(
    "will",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("person_id", UUIDColumnType, ForeignKey("person.id"), nullable=True),
    Column("will_type", _enum(WillType), nullable=False),
    Column("execution_date", Date, nullable=True),
    Column("jurisdiction", String, nullable=True),
    Column("pour_over_trust_id", UUIDColumnType, ForeignKey("trust.id"), nullable=True),
    Column("codicil_count", Integer, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

ancillary_document_table = Table(
    "ancillary_document",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("person_id", UUIDColumnType, ForeignKey("person.id"), nullable=False),
    Column("document_type", _enum(AncillaryDocumentType), nullable=False),
    Column("title", String, nullable=True),
    Column("status", _enum(DocumentStatus), nullable=False),
    Column("execution_date", Date, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

plan_role_table = Table(
    "plan_role",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("person_id", UUIDColumnType, ForeignKey("person.id"), nullable=False),
    Column("for_person_id", UUIDColumnType, ForeignKey("person.id"), nullable=True),
    Column("trust_id", UUIDColumnType, ForeignKey("trust.id"), nullable=True),
    Column("will_id", UUIDColumnType, ForeignKey("will.id"), nullable=True),
    Column(
        "ancillary_document_id",
        UUIDColumnType,
        ForeignKey("ancillary_document.id"),
        nullable=True,
    ),
    Column("role_type", _enum(RoleType), nullable=False),
    Column("role_category", _enum(RoleCategory), nullable=False),
    Column("is_primary", Boolean, nullable=False),
    Column("ordinal", Integer, nullable=False),
    Column("share_percentage", Integer, nullable=True),
    Column("share_type", _enum(ShareType), nullable=True),
    Column("established_in_version", Integer, nullable=False),
    Column("person_snapshot", JSONObjectType, nullable=True),
    Column("status", _enum(RoleStatus), nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_plan_role_plan_id", "plan_id"),
)

plan_version_table = Table(
    "plan_version",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("version", Integer, nullable=False),
    Column("change_type", _enum(VersionChangeType), nullable=False),
    Column("change_description", Text, nullable=True),
    Column("change_summary", Text, nullable=True),
    Column("effective_date", Date, nullable=True),
    Column("source_type", _enum(VersionSourceType), nullable=False),
    Column("source_markup", Text, nullable=True),
    Column("source_data", JSONObjectType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    UniqueConstraint("plan_id", "version", name="uq_plan_version_plan_id_version"),
)

plan_event_table = Table(
    "plan_event",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("event_type", _enum(PlanEventType), nullable=False),
    Column("event_date", UTCDateTime, nullable=False),
    Column("description", Text, nullable=True),
)

plan_matter_link_table = Table(
    "plan_matter_link",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "plan_id",
        UUIDColumnType,
        ForeignKey("estate_plan.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("matter_id", String, nullable=False),
    Column("relationship_type", _enum(MatterRelationshipType), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    # references between records are plain id columns, so no relationship() properties
    for entity_cls, table in (
        (Person, person_table),
        (User, user_table),
        (Client, client_table),
        (Relationship, relationship_table),
        (EstatePlan, estate_plan_table),
        (Trust, trust_table),
        (Will, will_table),
        (AncillaryDocument, ancillary_document_table),
        (PlanRole, plan_role_table),
        (PlanVersion, plan_version_table),
        (PlanEvent, plan_event_table),
        (PlanMatterLink, plan_matter_link_table),
    ):
        mapper_registry.map_imperatively(entity_cls, table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)

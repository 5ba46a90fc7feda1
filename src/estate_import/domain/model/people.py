"""Identity records: a person exists on its own, users and clients specialise it."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from estate_import.domain.model.entity import TimestampedEntity
from estate_import.domain.model.enums import (
    ClientStatus,
    EntityType,
    PersonType,
    ReferralType,
    RelationshipContext,
    UserRole,
    UserStatus,
)

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

_SSN_LAST4 = re.compile(r"^\d{4}$")


@dataclass(eq=False, kw_only=True)
class Person(TimestampedEntity):
    """Independent identity record. Needs no user or client to exist."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PERSON

    person_type: PersonType = PersonType.INDIVIDUAL
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    date_of_birth: date | None = None
    ssn_last4: str | None = None
    notes: str | None = None
    import_metadata: dict[str, object] | None = None

    def __post_init__(self) -> None:
        if self.ssn_last4 is not None and not _SSN_LAST4.match(self.ssn_last4):
            raise ValueError("ssn_last4 must be exactly four digits")
        if self.full_name is None and (self.first_name or self.last_name):
            self.full_name = self.display_name or None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(eq=False, kw_only=True)
class User(TimestampedEntity):
    """Login identity. ``person_id`` stays optional here so the guard can report it."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.USER

    person_id: UUID | None = None
    email: str
    role: UserRole = UserRole.CLIENT
    admin_level: int = 0
    status: UserStatus = UserStatus.ACTIVE


@dataclass(eq=False, kw_only=True)
class Client(TimestampedEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CLIENT

    person_id: UUID | None = None
    status: ClientStatus = ClientStatus.PROSPECT
    has_minor_children: bool | None = None
    children_info: str | None = None
    has_will: bool | None = None
    has_trust: bool | None = None
    referral_type: ReferralType | None = None
    referred_by_person_id: UUID | None = None
    referral_notes: str | None = None
    import_metadata: dict[str, object] | None = None


@dataclass(eq=False, kw_only=True)
class Relationship(TimestampedEntity):
    """Directed person-to-person link, e.g. SPOUSE or CHILD."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.RELATIONSHIP

    from_person_id: UUID | None = None
    to_person_id: UUID | None = None
    relationship_type: str
    context: RelationshipContext | None = None
    context_id: str | None = None
    ordinal: int = 0
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.relationship_type.strip():
            raise ValueError("relationship_type must not be blank")

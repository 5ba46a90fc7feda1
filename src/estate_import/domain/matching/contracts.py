"""Shared matching contract components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from uuid import UUID


class MatchType(StrEnum):
    """How an extracted person matched a registry person, strongest first."""

    SSN = "SSN"
    NAME_EMAIL = "NAME_EMAIL"
    NAME_DOB = "NAME_DOB"
    EMAIL_ONLY = "EMAIL_ONLY"
    NAME_ONLY = "NAME_ONLY"


@dataclass(frozen=True, slots=True)
class ConfidenceScores:
    ssn: int = 100
    name_email: int = 90
    name_dob: int = 75
    email_only: int = 70
    name_only: int = 60

    def for_type(self, match_type: MatchType) -> int:
        match match_type:
            case MatchType.SSN:
                return self.ssn
            case MatchType.NAME_EMAIL:
                return self.name_email
            case MatchType.NAME_DOB:
                return self.name_dob
            case MatchType.EMAIL_ONLY:
                return self.email_only
            case MatchType.NAME_ONLY:
                return self.name_only


DEFAULT_SCORES: Final = ConfidenceScores()


class MatchField(StrEnum):
    NAME = "name"
    EMAIL = "email"
    DATE_OF_BIRTH = "dateOfBirth"
    SSN = "ssn"


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchCandidate:
    """An existing person an extracted name may refer to. Never mutated."""

    person_id: UUID
    person_name: str
    email: str | None
    date_of_birth: str | None
    match_type: MatchType
    confidence: int
    matching_fields: tuple[MatchField, ...]


class PersonTag(StrEnum):
    """Why a person was picked up from the export."""

    CLIENT = "client"
    SPOUSE = "spouse"
    CHILD = "child"
    BENEFICIARY = "beneficiary"
    FIDUCIARY = "fiduciary"


@dataclass(frozen=True, slots=True, kw_only=True)
class PersonQuery:
    name: str | None = None
    email: str | None = None
    date_of_birth: str | None = None
    ssn: str | None = None


@dataclass(slots=True, kw_only=True)
class ExtractedPerson:
    """A name found in the export, with every role label it holds in the plan."""

    name: str
    tag: PersonTag
    email: str | None = None
    date_of_birth: str | None = None
    ssn: str | None = None
    roles_in_plan: list[str] = field(default_factory=list[str])
    matches: list[MatchCandidate] = field(default_factory=list[MatchCandidate])

    def as_query(self) -> PersonQuery:
        return PersonQuery(
            name=self.name,
            email=self.email,
            date_of_birth=self.date_of_birth,
            ssn=self.ssn,
        )

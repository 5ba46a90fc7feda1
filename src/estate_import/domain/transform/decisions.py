"""Per-person import decisions and import-wide options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID


class DecisionAction(StrEnum):
    USE_EXISTING = "use_existing"
    CREATE_NEW = "create_new"


@dataclass(frozen=True, slots=True)
class UseExisting:
    """Link the extracted name to a person already in the registry."""

    person_id: UUID
    action: Literal[DecisionAction.USE_EXISTING] = DecisionAction.USE_EXISTING


@dataclass(frozen=True, slots=True)
class CreateNew:
    """Create a fresh person record for the extracted name."""

    action: Literal[DecisionAction.CREATE_NEW] = DecisionAction.CREATE_NEW


type PersonDecision = UseExisting | CreateNew
type DecisionsByName = Mapping[str, PersonDecision]


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportOptions:
    is_amendment: bool = False
    existing_plan_id: UUID | None = None
    create_client_records: bool = False
    link_to_matter_id: str | None = None

    def __post_init__(self) -> None:
        if self.is_amendment and self.existing_plan_id is None:
            raise ValueError("an amendment needs existing_plan_id")

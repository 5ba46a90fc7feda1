"""Pydantic models for parse-session payloads and import requests."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Literal
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from estate_import.domain.export import FieldTable
from estate_import.domain.model import utcnow
from estate_import.domain.ports import ParseSession
from estate_import.domain.transform import (
    CreateNew,
    DecisionAction,
    ImportOptions,
    PersonDecision,
    UseExisting,
)

type FieldScalarPayload = bool | float | str
type FieldValuePayload = FieldScalarPayload | list[FieldScalarPayload]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class WealthCounselBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ParseSessionPayload(WealthCounselBaseModel):
    """Cached form of a parse session: the field table plus the source markup."""

    session_id: str = Field(alias="parseId")
    fields: dict[str, FieldValuePayload] = Field(default_factory=dict, alias="rawFields")
    source: str | None = Field(default=None, alias="xmlString")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    @classmethod
    def from_session(cls, session: ParseSession) -> ParseSessionPayload:
        return cls(
            session_id=session.session_id,
            fields=session.fields.to_dict(),
            source=session.source,
            created_at=session.created_at,
        )

    def to_session(self) -> ParseSession:
        return ParseSession(
            session_id=self.session_id,
            fields=FieldTable.from_dict(self.fields),
            source=self.source,
            created_at=self.created_at,
        )


class PersonDecisionPayload(WealthCounselBaseModel):
    extracted_name: str = Field(alias="extractedName")
    action: Literal["use_existing", "create_new"]
    existing_person_id: UUID | None = Field(default=None, alias="existingPersonId")

    _normalize_name = field_validator("extracted_name", mode="before")(_blank_to_none)

    @model_validator(mode="after")
    def _require_existing_id(self) -> PersonDecisionPayload:
        if self.action == DecisionAction.USE_EXISTING and self.existing_person_id is None:
            raise ValueError("existingPersonId is required for use_existing")
        return self

    def to_decision(self) -> PersonDecision:
        if self.action == DecisionAction.USE_EXISTING and self.existing_person_id is not None:
            return UseExisting(self.existing_person_id)
        return CreateNew()


class ImportRequestPayload(WealthCounselBaseModel):
    """Operator decisions for one parse session."""

    session_id: str = Field(alias="parseId")
    person_decisions: list[PersonDecisionPayload] = Field(
        default_factory=list, alias="personDecisions"
    )
    is_amendment: bool = Field(default=False, alias="isAmendment")
    existing_plan_id: UUID | None = Field(default=None, alias="existingPlanId")
    link_to_matter_id: str | None = Field(default=None, alias="linkToMatterId")
    create_client_records: bool = Field(default=False, alias="createClientRecords")

    _normalize_matter = field_validator("link_to_matter_id", mode="before")(_blank_to_none)

    @model_validator(mode="after")
    def _require_plan_for_amendment(self) -> ImportRequestPayload:
        if self.is_amendment and self.existing_plan_id is None:
            raise ValueError("existingPlanId is required for an amendment")
        return self

    def decisions(self) -> dict[str, PersonDecision]:
        """Decisions keyed by extracted name; a later entry for a name wins."""
        return {item.extracted_name: item.to_decision() for item in self.person_decisions}

    def options(self) -> ImportOptions:
        return ImportOptions(
            is_amendment=self.is_amendment,
            existing_plan_id=self.existing_plan_id,
            create_client_records=self.create_client_records,
            link_to_matter_id=self.link_to_matter_id,
        )

"""Build the plan aggregate (plan, trust, wills, documents) from an export."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from estate_import.domain.export import parse_iso_date
from estate_import.domain.model import (
    AncillaryDocument,
    AncillaryDocumentType,
    EstatePlan,
    PlanEvent,
    PlanEventType,
    PlanStatus,
    PlanType,
    PlanVersion,
    Trust,
    TrustType,
    VersionChangeType,
    Will,
    WillType,
    utcnow,
)
from estate_import.domain.transform.people import SOURCE

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from estate_import.domain.export import IndividualFiduciaries, ParsedExport

IMPORT_DESCRIPTION: Final = "Imported from WealthCounsel"

TRUST_TYPES: Final[dict[str, TrustType]] = {
    "Revocable Living Trust": TrustType.REVOCABLE_LIVING,
    "RLT": TrustType.REVOCABLE_LIVING,
    "Irrevocable Living Trust": TrustType.IRREVOCABLE_LIVING,
    "Testamentary Trust": TrustType.TESTAMENTARY,
    "Special Needs Trust": TrustType.SPECIAL_NEEDS,
    "SNT": TrustType.SPECIAL_NEEDS,
    "Charitable Remainder Trust": TrustType.CHARITABLE_REMAINDER,
    "CRT": TrustType.CHARITABLE_REMAINDER,
    "Charitable Lead Trust": TrustType.CHARITABLE_LEAD,
    "CLT": TrustType.CHARITABLE_LEAD,
    "ILIT": TrustType.ILIT,
    "Irrevocable Life Insurance Trust": TrustType.ILIT,
    "GRAT": TrustType.GRAT,
    "Grantor Retained Annuity Trust": TrustType.GRAT,
    "QPRT": TrustType.QPRT,
    "Qualified Personal Residence Trust": TrustType.QPRT,
    "Dynasty Trust": TrustType.DYNASTY,
}

_DOCUMENT_TITLES: Final[dict[AncillaryDocumentType, str]] = {
    AncillaryDocumentType.FINANCIAL_POA: "Financial Power of Attorney",
    AncillaryDocumentType.HEALTHCARE_POA: "Healthcare Power of Attorney",
    AncillaryDocumentType.NOMINATION_OF_GUARDIAN: "Nomination of Guardian",
}


def map_trust_type(label: str | None) -> TrustType:
    if not label:
        return TrustType.REVOCABLE_LIVING
    return TRUST_TYPES.get(label, TrustType.OTHER)


def plan_name_for(export: ParsedExport) -> str:
    if export.trust is not None:
        return export.trust.name
    return f"{export.client.display_name or 'Unknown'} Estate Plan"


def effective_date_for(export: ParsedExport) -> date | None:
    """Trust sign date, else will execution date; unusable values count as absent."""
    signed = parse_iso_date(export.trust.sign_date) if export.trust is not None else None
    return signed or parse_iso_date(export.will.execution_date)


@dataclass(slots=True, kw_only=True)
class PlanAggregate:
    plan: EstatePlan
    trust: Trust | None = None
    wills: list[Will] = field(default_factory=list[Will])
    documents: list[AncillaryDocument] = field(default_factory=list[AncillaryDocument])
    version: PlanVersion
    event: PlanEvent


def build_plan_aggregate(
    export: ParsedExport,
    *,
    client_person_id: UUID,
    spouse_person_id: UUID | None = None,
    source_markup: str | None = None,
    at: datetime | None = None,
) -> PlanAggregate:
    """A new plan at version 1, ACTIVE when an effective date is known, else DRAFT."""

    when = at or utcnow()
    effective_date = effective_date_for(export)
    plan = EstatePlan(
        grantor_person_id_1=client_person_id,
        grantor_person_id_2=spouse_person_id,
        plan_type=export.plan_type,
        plan_name=plan_name_for(export),
        status=PlanStatus.ACTIVE if effective_date else PlanStatus.DRAFT,
        effective_date=effective_date,
        external_client_id=export.client_id,
        import_metadata={
            "source": SOURCE,
            "data_file_version": export.data_file_version,
            "imported_at": when.isoformat(),
            "field_count": len(export.fields),
        },
        created_at=when,
        updated_at=when,
    )

    trust = _build_trust(export, plan.id)
    wills = _build_wills(
        export,
        plan_id=plan.id,
        trust=trust,
        client_person_id=client_person_id,
        spouse_person_id=spouse_person_id,
        effective_date=effective_date,
    )
    documents = _build_documents(export.fiduciaries.client, plan.id, client_person_id)
    if spouse_person_id is not None:
        documents += _build_documents(export.fiduciaries.spouse, plan.id, spouse_person_id)

    version = build_version(
        export,
        plan_id=plan.id,
        version=1,
        change_type=VersionChangeType.CREATION,
        effective_date=effective_date,
        source_markup=source_markup,
        at=when,
    )
    event = PlanEvent(
        plan_id=plan.id,
        event_type=PlanEventType.PLAN_CREATED,
        event_date=when,
        description="Estate plan imported from WealthCounsel",
    )
    return PlanAggregate(
        plan=plan,
        trust=trust,
        wills=wills,
        documents=documents,
        version=version,
        event=event,
    )


def build_version(
    export: ParsedExport,
    *,
    plan_id: UUID,
    version: int,
    change_type: VersionChangeType,
    effective_date: date | None = None,
    source_markup: str | None = None,
    at: datetime | None = None,
) -> PlanVersion:
    when = at or utcnow()
    kind = "Trust" if export.plan_type is PlanType.TRUST_BASED else "Will"
    verb = "amended" if change_type is VersionChangeType.AMENDMENT else "created"
    return PlanVersion(
        plan_id=plan_id,
        version=version,
        change_type=change_type,
        change_description=IMPORT_DESCRIPTION,
        change_summary=f"{kind} {verb}",
        effective_date=effective_date,
        source_markup=source_markup,
        source_data={
            "raw_field_count": len(export.fields),
            "client_id": export.client_id,
            "imported_at": when.isoformat(),
        },
        created_at=when,
    )


def amend_plan(
    plan: EstatePlan,
    export: ParsedExport,
    *,
    source_markup: str | None = None,
    at: datetime | None = None,
) -> tuple[PlanVersion, PlanEvent]:
    """Bump ``plan`` to its next version; raises ``PlanStatusError`` from closed plans."""

    when = at or utcnow()
    event = plan.amend(at=when, description="Estate plan amended from WealthCounsel import")
    version = build_version(
        export,
        plan_id=plan.id,
        version=plan.current_version,
        change_type=VersionChangeType.AMENDMENT,
        effective_date=effective_date_for(export),
        source_markup=source_markup,
        at=when,
    )
    return version, event


def _build_trust(export: ParsedExport, plan_id: UUID) -> Trust | None:
    if export.plan_type is not PlanType.TRUST_BASED or export.trust is None:
        return None
    source = export.trust
    trust_type = map_trust_type(source.trust_type)
    return Trust(
        plan_id=plan_id,
        trust_name=source.name,
        trust_type=trust_type,
        is_joint=source.is_joint,
        is_revocable=trust_type is TrustType.REVOCABLE_LIVING,
        jurisdiction=source.jurisdiction,
        formation_date=parse_iso_date(source.sign_date),
        external_trust_id=export.client_id,
        trust_settings=dict(source.mc_options) or None,
    )


def _build_wills(
    export: ParsedExport,
    *,
    plan_id: UUID,
    trust: Trust | None,
    client_person_id: UUID,
    spouse_person_id: UUID | None,
    effective_date: date | None,
) -> list[Will]:
    execution_date = parse_iso_date(export.will.execution_date) or effective_date

    def will_for(person_id: UUID) -> Will:
        return Will(
            plan_id=plan_id,
            person_id=person_id,
            will_type=WillType.POUR_OVER if trust is not None else WillType.SIMPLE,
            execution_date=execution_date,
            jurisdiction=export.will.jurisdiction,
            pour_over_trust_id=trust.id if trust is not None else None,
            codicil_count=0,
        )

    wills: list[Will] = []
    if export.will.personal_rep_names or export.plan_type is PlanType.WILL_BASED:
        wills.append(will_for(client_person_id))
    if spouse_person_id is not None and export.fiduciaries.spouse.executors:
        wills.append(will_for(spouse_person_id))
    return wills


def _build_documents(
    fiduciaries: IndividualFiduciaries,
    plan_id: UUID,
    person_id: UUID,
) -> list[AncillaryDocument]:
    wanted: list[AncillaryDocumentType] = []
    if fiduciaries.financial_agents or fiduciaries.financial_agent_successors:
        wanted.append(AncillaryDocumentType.FINANCIAL_POA)
    if fiduciaries.healthcare_agents or fiduciaries.healthcare_agent_successors:
        wanted.append(AncillaryDocumentType.HEALTHCARE_POA)
    if fiduciaries.guardians:
        wanted.append(AncillaryDocumentType.NOMINATION_OF_GUARDIAN)
    return [
        AncillaryDocument(
            plan_id=plan_id,
            person_id=person_id,
            document_type=document_type,
            title=_DOCUMENT_TITLES[document_type],
        )
        for document_type in wanted
    ]

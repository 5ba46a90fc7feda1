"""Preview summary of a parsed export."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from estate_import.domain.model import RoleType

if TYPE_CHECKING:
    from estate_import.domain.export.extract import FiduciaryMention, ParsedExport

WILL_BASED_SUMMARY: Final = "Will-Based Plan"

ROLE_LABELS: Final[dict[RoleType, str]] = {
    RoleType.TRUSTEE: "Trustee",
    RoleType.SUCCESSOR_TRUSTEE: "Successor Trustee",
    RoleType.TRUST_PROTECTOR: "Trust Protector",
    RoleType.FINANCIAL_AGENT: "Financial Agent",
    RoleType.ALTERNATE_FINANCIAL_AGENT: "Successor Financial Agent",
    RoleType.HEALTHCARE_AGENT: "Healthcare Agent",
    RoleType.ALTERNATE_HEALTHCARE_AGENT: "Successor Healthcare Agent",
    RoleType.EXECUTOR: "Executor",
    RoleType.GUARDIAN_OF_PERSON: "Guardian",
}


def role_label(role_type: RoleType) -> str:
    return ROLE_LABELS.get(role_type, role_type.value.replace("_", " ").title())


@dataclass(frozen=True, slots=True, kw_only=True)
class FiduciaryRow:
    name: str
    role: str
    for_person: str


@dataclass(slots=True, kw_only=True)
class FiduciarySummary:
    unique_people: int = 0
    total_role_assignments: int = 0
    role_types: list[str] = field(default_factory=list[str])


@dataclass(slots=True, kw_only=True)
class ExportSummary:
    client_summary: str
    plan_summary: str
    role_counts: dict[str, int]
    fiduciaries: FiduciarySummary
    field_count: int


def summarize_export(export: ParsedExport) -> ExportSummary:
    mentions = export.fiduciaries.all()
    return ExportSummary(
        client_summary=_client_summary(export),
        plan_summary=_plan_summary(export),
        role_counts=_role_counts(export),
        fiduciaries=_fiduciary_summary(mentions),
        field_count=len(export.fields),
    )


def fiduciary_rows(export: ParsedExport) -> list[FiduciaryRow]:
    """Flat listing of every fiduciary mention, for display."""
    return [
        FiduciaryRow(
            name=mention.person_name,
            role=role_label(mention.role_type),
            for_person=mention.for_person.value,
        )
        for mention in export.fiduciaries.all()
    ]


def _client_summary(export: ParsedExport) -> str:
    names = [export.client.display_name or "Unknown client"]
    if export.spouse is not None and export.spouse.display_name:
        names.append(export.spouse.display_name)
    summary = " & ".join(names)
    if export.children:
        noun = "child" if len(export.children) == 1 else "children"
        summary += f" ({len(export.children)} {noun})"
    return summary


def _plan_summary(export: ParsedExport) -> str:
    if export.trust is None:
        return WILL_BASED_SUMMARY
    if export.trust.is_joint:
        return f"{export.trust.name} (Joint)"
    return export.trust.name


def _role_counts(export: ParsedExport) -> dict[str, int]:
    fiduciaries = export.fiduciaries
    return {
        "trustees": len(fiduciaries.trustees),
        "successor_trustees": len(fiduciaries.successor_trustees),
        "trust_protectors": len(fiduciaries.trust_protectors),
        "client_fiduciaries": len(fiduciaries.client.all()),
        "spouse_fiduciaries": len(fiduciaries.spouse.all()),
        "beneficiaries": len(export.beneficiaries),
        "children": len(export.children),
    }


def _fiduciary_summary(mentions: list[FiduciaryMention]) -> FiduciarySummary:
    labels: list[str] = []
    for mention in mentions:
        label = role_label(mention.role_type)
        if label not in labels:
            labels.append(label)
    return FiduciarySummary(
        unique_people=len({mention.person_name.lower() for mention in mentions}),
        total_role_assignments=len(mentions),
        role_types=labels,
    )

"""Read the known export field names out of a ``FieldTable``.

Field names follow the document-assembly vendor's conventions. Spouse-specific
variants of per-principal fields carry a ``" wf"`` suffix, corrected entries
a ``" mc"`` suffix, and children may be split into ``" h"`` / ``" wf"`` lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from estate_import.domain.model import PlanType, RoleType

if TYPE_CHECKING:
    from estate_import.domain.export.fields import FieldTable, FieldValue

UNNAMED_TRUST: Final = "Unnamed Trust"
SPOUSE_SUFFIX: Final = " wf"
CORRECTED_SUFFIX: Final = " mc"
MC_OPTION_PREFIXES: Final = ("MC ", "MC_")
MAX_NUMBERED_BENEFICIARIES: Final = 10

CHILD_NAME_FIELDS: Final = ("Child name", "Child name h", "Child name wf")


class DocumentOwner(StrEnum):
    """Whose document a fiduciary mention belongs to."""

    CLIENT = "CLIENT"
    SPOUSE = "SPOUSE"
    TRUST = "TRUST"


@dataclass(slots=True, kw_only=True)
class ExportPerson:
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    suffix: str | None = None
    email: str | None = None
    phone: str | None = None
    cell_phone: str | None = None
    work_phone: str | None = None
    address: str | None = None
    city: str | None = None
    county: str | None = None
    state: str | None = None
    zip_code: str | None = None
    date_of_birth: str | None = None
    ssn: str | None = None
    date_of_death: str | None = None

    @property
    def display_name(self) -> str | None:
        if self.full_name:
            return self.full_name
        joined = " ".join(part for part in (self.first_name, self.last_name) if part)
        return joined or None


@dataclass(slots=True, kw_only=True)
class ExportTrust:
    name: str
    trust_type: str | None = None
    is_joint: bool = False
    sign_date: str | None = None
    jurisdiction: str | None = None
    trustee_names: list[str] = field(default_factory=list[str])
    successor_trustee_names: list[str] = field(default_factory=list[str])
    mc_options: dict[str, FieldValue] = field(default_factory=dict[str, "FieldValue"])


@dataclass(slots=True, kw_only=True)
class ExportWill:
    execution_date: str | None = None
    jurisdiction: str | None = None
    personal_rep_names: list[str] = field(default_factory=list[str])


@dataclass(frozen=True, slots=True, kw_only=True)
class FiduciaryMention:
    person_name: str
    role_type: RoleType
    is_primary: bool
    ordinal: int
    for_person: DocumentOwner


@dataclass(slots=True, kw_only=True)
class IndividualFiduciaries:
    """Fiduciaries named in one principal's own documents."""

    financial_agents: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])
    financial_agent_successors: list[FiduciaryMention] = field(
        default_factory=list[FiduciaryMention]
    )
    healthcare_agents: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])
    healthcare_agent_successors: list[FiduciaryMention] = field(
        default_factory=list[FiduciaryMention]
    )
    executors: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])
    guardians: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])

    def all(self) -> list[FiduciaryMention]:
        return [
            *self.financial_agents,
            *self.financial_agent_successors,
            *self.healthcare_agents,
            *self.healthcare_agent_successors,
            *self.executors,
            *self.guardians,
        ]


@dataclass(slots=True, kw_only=True)
class Fiduciaries:
    trustees: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])
    successor_trustees: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])
    trust_protectors: list[FiduciaryMention] = field(default_factory=list[FiduciaryMention])
    client: IndividualFiduciaries = field(default_factory=IndividualFiduciaries)
    spouse: IndividualFiduciaries = field(default_factory=IndividualFiduciaries)

    def trust_level(self) -> list[FiduciaryMention]:
        return [*self.trustees, *self.successor_trustees, *self.trust_protectors]

    def all(self) -> list[FiduciaryMention]:
        return [*self.trust_level(), *self.client.all(), *self.spouse.all()]


@dataclass(frozen=True, slots=True, kw_only=True)
class ExportBeneficiary:
    name: str
    percentage: str | None = None
    relationship: str | None = None
    address: str | None = None


@dataclass(slots=True, kw_only=True)
class ParsedExport:
    """Structured view of one export, plus the field table it came from."""

    fields: FieldTable
    client: ExportPerson
    spouse: ExportPerson | None = None
    children: list[ExportPerson] = field(default_factory=list[ExportPerson])
    plan_type: PlanType = PlanType.WILL_BASED
    trust: ExportTrust | None = None
    will: ExportWill = field(default_factory=ExportWill)
    fiduciaries: Fiduciaries = field(default_factory=Fiduciaries)
    beneficiaries: list[ExportBeneficiary] = field(default_factory=list[ExportBeneficiary])
    client_id: str | None = None
    data_file_version: str | None = None

    @property
    def is_joint(self) -> bool:
        return self.trust is not None and self.trust.is_joint


def extract_export(fields: FieldTable) -> ParsedExport:
    """Build a ``ParsedExport``. Missing fields degrade to None, never raise."""

    has_trust = fields.text("RLT trust name") is not None
    return ParsedExport(
        fields=fields,
        client=_extract_principal(fields, "Client"),
        spouse=_extract_spouse(fields),
        children=_extract_children(fields),
        plan_type=PlanType.TRUST_BASED if has_trust else PlanType.WILL_BASED,
        trust=_extract_trust(fields) if has_trust else None,
        will=_extract_will(fields),
        fiduciaries=_extract_fiduciaries(fields),
        beneficiaries=_extract_beneficiaries(fields),
        client_id=fields.text("Client_id"),
        data_file_version=fields.text("Data File Version"),
    )


def _extract_principal(fields: FieldTable, prefix: str) -> ExportPerson:
    return ExportPerson(
        full_name=fields.text(f"{prefix} name"),
        first_name=fields.text(f"{prefix} name first"),
        last_name=fields.text(f"{prefix} name last"),
        middle_name=fields.text(f"{prefix} name middle"),
        suffix=fields.text(f"{prefix} name suffix"),
        email=fields.text(f"{prefix} email"),
        phone=fields.text(f"{prefix} phone"),
        cell_phone=fields.text(f"{prefix} phone cell"),
        work_phone=fields.text(f"{prefix} work phone") or fields.text(f"{prefix} phone work"),
        address=fields.text(f"{prefix} street address"),
        city=fields.text(f"{prefix} city"),
        county=fields.text(f"{prefix} county"),
        zip_code=fields.text(f"{prefix} zip"),
        date_of_birth=fields.text(f"{prefix} dob"),
        ssn=fields.text(f"{prefix} ssn"),
    )


def _extract_spouse(fields: FieldTable) -> ExportPerson | None:
    if fields.text("Spouse name") is None:
        return None
    spouse = _extract_principal(fields, "Spouse")
    spouse.date_of_death = fields.text("Spouse dod")
    return spouse


def _extract_children(fields: FieldTable) -> list[ExportPerson]:
    children: list[ExportPerson] = []
    seen: set[str] = set()
    for name_field in CHILD_NAME_FIELDS:
        names = fields.texts(name_field)
        dobs = fields.texts(name_field.replace("name", "dob"))
        for index, name in enumerate(names):
            if name is None or name in seen:
                continue
            seen.add(name)
            dob = dobs[index] if index < len(dobs) else None
            children.append(ExportPerson(full_name=name, date_of_birth=dob))
    return children


def _extract_trust(fields: FieldTable) -> ExportTrust:
    return ExportTrust(
        name=fields.text("RLT trust name") or UNNAMED_TRUST,
        trust_type=fields.text("MC RLT Trust Type"),
        is_joint=fields.flag("Joint Trust"),
        sign_date=fields.text("Trust sign date"),
        trustee_names=_name_list(fields, "RLT Trustee Initial name"),
        successor_trustee_names=_name_list(fields, "RLT Trustee Successor name"),
        mc_options=fields.with_prefix(*MC_OPTION_PREFIXES),
    )


def _extract_will(fields: FieldTable) -> ExportWill:
    return ExportWill(
        execution_date=fields.text("Will execution date"),
        personal_rep_names=_name_list(fields, "Personal Representative name"),
    )


def _name_list(fields: FieldTable, base_name: str) -> list[str]:
    # base and corrected variants only; " wf" lists belong to the spouse
    names: list[str] = []
    for suffix in ("", CORRECTED_SUFFIX):
        for name in fields.texts(base_name + suffix):
            if name is not None and name not in names:
                names.append(name)
    return names


def _extract_fiduciaries(fields: FieldTable) -> Fiduciaries:
    return Fiduciaries(
        trustees=_mentions(
            fields, "RLT Trustee Initial name", RoleType.TRUSTEE, DocumentOwner.TRUST
        ),
        successor_trustees=_mentions(
            fields, "Successor Trustee incapacity", RoleType.SUCCESSOR_TRUSTEE, DocumentOwner.TRUST
        ),
        trust_protectors=_mentions(
            fields, "Trust Protector name RLT", RoleType.TRUST_PROTECTOR, DocumentOwner.TRUST
        ),
        client=_individual_fiduciaries(fields, DocumentOwner.CLIENT),
        spouse=_individual_fiduciaries(fields, DocumentOwner.SPOUSE),
    )


def _individual_fiduciaries(fields: FieldTable, owner: DocumentOwner) -> IndividualFiduciaries:
    suffix = SPOUSE_SUFFIX if owner is DocumentOwner.SPOUSE else ""
    return IndividualFiduciaries(
        financial_agents=_mentions(
            fields, f"Financial Agent initial name{suffix}", RoleType.FINANCIAL_AGENT, owner
        ),
        financial_agent_successors=_mentions(
            fields,
            f"Financial Agent successor name{suffix}",
            RoleType.ALTERNATE_FINANCIAL_AGENT,
            owner,
        ),
        healthcare_agents=_mentions(
            fields, f"Healthcare Agent name{suffix}", RoleType.HEALTHCARE_AGENT, owner
        ),
        healthcare_agent_successors=_mentions(
            fields,
            f"Healthcare Agent Successor name{suffix}",
            RoleType.ALTERNATE_HEALTHCARE_AGENT,
            owner,
        ),
        executors=_mentions(
            fields, f"Personal Representative name{suffix}", RoleType.EXECUTOR, owner
        ),
        guardians=_mentions(
            fields, f"Will Guardian name{suffix}", RoleType.GUARDIAN_OF_PERSON, owner
        ),
    )


def _mentions(
    fields: FieldTable,
    field_name: str,
    role_type: RoleType,
    owner: DocumentOwner,
) -> list[FiduciaryMention]:
    mentions: list[FiduciaryMention] = []
    seen: set[str] = set()
    for suffix in ("", CORRECTED_SUFFIX):
        for index, name in enumerate(fields.texts(field_name + suffix)):
            # corrected variants often repeat a base entry in another case
            if name is None or name.casefold() in seen:
                continue
            seen.add(name.casefold())
            mentions.append(
                FiduciaryMention(
                    person_name=name,
                    role_type=role_type,
                    is_primary=index == 0 and suffix == "",
                    ordinal=index + 1,
                    for_person=owner,
                )
            )
    return mentions


def _extract_beneficiaries(fields: FieldTable) -> list[ExportBeneficiary]:
    beneficiaries: list[ExportBeneficiary] = []
    for number in range(1, MAX_NUMBERED_BENEFICIARIES + 1):
        name = fields.text(f"Residuary Beneficiary name {number}")
        if name is None:
            continue
        beneficiaries.append(
            ExportBeneficiary(
                name=name,
                percentage=fields.text(f"Residuary Beneficiary percentage {number}"),
                relationship=fields.text(f"Residuary Beneficiary relationship {number}"),
                address=fields.text(f"Residuary Beneficiary physical address {number}"),
            )
        )

    base_name = fields.text("Residuary Beneficiary name")
    if base_name is not None and all(b.name != base_name for b in beneficiaries):
        beneficiaries.append(
            ExportBeneficiary(
                name=base_name,
                percentage=fields.text("Residuary Beneficiary percentage"),
                relationship=fields.text("Residuary Beneficiary relationship"),
            )
        )
    return beneficiaries

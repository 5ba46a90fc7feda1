"""Plan role generation and deduplication."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from estate_import.domain.model import (
    AncillaryDocumentType,
    PlanRole,
    RoleStatus,
    RoleType,
    ShareType,
)
from estate_import.domain.transform.people import find_person_id

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from estate_import.domain.export import (
        ExportBeneficiary,
        FiduciaryMention,
        IndividualFiduciaries,
        ParsedExport,
    )
    from estate_import.domain.model import AncillaryDocument, RoleKey, Trust, Will

log = logging.getLogger(__name__)


@dataclass(slots=True)
class DocumentIndex:
    """Ids of the documents roles may point at, by owner."""

    trust_id: UUID | None = None
    wills: dict[UUID, UUID] = field(default_factory=dict["UUID", "UUID"])
    documents: dict[tuple[UUID, AncillaryDocumentType], UUID] = field(
        default_factory=dict[tuple["UUID", AncillaryDocumentType], "UUID"]
    )

    @classmethod
    def from_records(
        cls,
        trusts: Iterable[Trust],
        wills: Iterable[Will],
        documents: Iterable[AncillaryDocument],
    ) -> DocumentIndex:
        index = cls(trust_id=next((trust.id for trust in trusts), None))
        for will in wills:
            if will.person_id is not None:
                index.wills.setdefault(will.person_id, will.id)
        for document in documents:
            if document.person_id is not None:
                key = (document.person_id, document.document_type)
                index.documents.setdefault(key, document.id)
        return index

    def document_for(self, person_id: UUID, document_type: AncillaryDocumentType) -> UUID | None:
        return self.documents.get((person_id, document_type))


class _RoleBuilder:
    def __init__(
        self,
        *,
        plan_id: UUID,
        lookup: Mapping[str, UUID],
        version: int,
    ) -> None:
        self.plan_id = plan_id
        self.lookup = lookup
        self.version = version
        self.roles: list[PlanRole] = []

    def add(
        self,
        name: str,
        role_type: RoleType,
        *,
        is_primary: bool,
        ordinal: int,
        person_id: UUID | None = None,
        for_person_id: UUID | None = None,
        trust_id: UUID | None = None,
        will_id: UUID | None = None,
        ancillary_document_id: UUID | None = None,
        share_percentage: int | None = None,
    ) -> None:
        resolved = person_id or find_person_id(name, self.lookup)
        if resolved is None:
            log.debug("Dropping %s role for unresolved person %r", role_type, name)
            return
        self.roles.append(
            PlanRole(
                plan_id=self.plan_id,
                person_id=resolved,
                for_person_id=for_person_id,
                trust_id=trust_id,
                will_id=will_id,
                ancillary_document_id=ancillary_document_id,
                role_type=role_type,
                is_primary=is_primary,
                ordinal=ordinal,
                share_percentage=share_percentage,
                share_type=ShareType.PERCENTAGE if share_percentage is not None else None,
                established_in_version=self.version,
                person_snapshot={"name": name},
                status=RoleStatus.ACTIVE,
            )
        )


def build_roles(
    export: ParsedExport,
    *,
    plan_id: UUID,
    lookup: Mapping[str, UUID],
    client_person_id: UUID,
    spouse_person_id: UUID | None = None,
    documents: DocumentIndex | None = None,
    version: int = 1,
) -> list[PlanRole]:
    """Every role the export implies, deduplicated by (person, role type, for-person).

    Names that cannot be resolved through ``lookup`` are dropped.
    """

    index = documents or DocumentIndex()
    builder = _RoleBuilder(plan_id=plan_id, lookup=lookup, version=version)

    # joint grantors carry the same role type and neither is primary over the other
    builder.add(
        export.client.display_name or "",
        RoleType.GRANTOR,
        is_primary=True,
        ordinal=1,
        person_id=client_person_id,
    )
    if export.spouse is not None and spouse_person_id is not None:
        builder.add(
            export.spouse.display_name or "",
            RoleType.GRANTOR,
            is_primary=True,
            ordinal=1,
            person_id=spouse_person_id,
        )

    fiduciaries = export.fiduciaries
    ordinal = 0
    for mention in fiduciaries.trustees:
        ordinal += 1
        builder.add(
            mention.person_name,
            RoleType.TRUSTEE if mention.is_primary else RoleType.CO_TRUSTEE,
            is_primary=mention.is_primary,
            ordinal=ordinal,
            trust_id=index.trust_id,
        )
    for mention in fiduciaries.successor_trustees:
        ordinal += 1
        builder.add(
            mention.person_name,
            RoleType.SUCCESSOR_TRUSTEE,
            is_primary=False,
            ordinal=ordinal,
            trust_id=index.trust_id,
        )
    for position, mention in enumerate(fiduciaries.trust_protectors, start=1):
        builder.add(
            mention.person_name,
            RoleType.TRUST_PROTECTOR,
            is_primary=mention.is_primary,
            ordinal=position,
            trust_id=index.trust_id,
        )

    _add_individual_roles(builder, fiduciaries.client, client_person_id, index)
    if export.spouse is not None and spouse_person_id is not None:
        _add_individual_roles(builder, fiduciaries.spouse, spouse_person_id, index)

    _add_beneficiary_roles(builder, export.beneficiaries, index.trust_id)
    return dedupe_roles(builder.roles)


def _add_individual_roles(
    builder: _RoleBuilder,
    fiduciaries: IndividualFiduciaries,
    owner_id: UUID,
    index: DocumentIndex,
) -> None:
    financial_poa = index.document_for(owner_id, AncillaryDocumentType.FINANCIAL_POA)
    _add_agent_roles(
        builder,
        fiduciaries.financial_agents,
        fiduciaries.financial_agent_successors,
        (RoleType.FINANCIAL_AGENT, RoleType.ALTERNATE_FINANCIAL_AGENT),
        owner_id,
        financial_poa,
    )
    healthcare_poa = index.document_for(owner_id, AncillaryDocumentType.HEALTHCARE_POA)
    _add_agent_roles(
        builder,
        fiduciaries.healthcare_agents,
        fiduciaries.healthcare_agent_successors,
        (RoleType.HEALTHCARE_AGENT, RoleType.ALTERNATE_HEALTHCARE_AGENT),
        owner_id,
        healthcare_poa,
    )

    will_id = index.wills.get(owner_id)
    for position, mention in enumerate(fiduciaries.executors, start=1):
        first = position == 1
        builder.add(
            mention.person_name,
            RoleType.EXECUTOR if first else RoleType.ALTERNATE_EXECUTOR,
            is_primary=first,
            ordinal=position,
            for_person_id=owner_id,
            will_id=will_id,
        )

    nomination = index.document_for(owner_id, AncillaryDocumentType.NOMINATION_OF_GUARDIAN)
    for position, mention in enumerate(fiduciaries.guardians, start=1):
        builder.add(
            mention.person_name,
            RoleType.GUARDIAN_OF_PERSON,
            is_primary=mention.is_primary,
            ordinal=position,
            for_person_id=owner_id,
            ancillary_document_id=nomination,
        )


def _add_agent_roles(
    builder: _RoleBuilder,
    agents: list[FiduciaryMention],
    successors: list[FiduciaryMention],
    role_types: tuple[RoleType, RoleType],
    owner_id: UUID,
    document_id: UUID | None,
) -> None:
    # agents and their successors share one ordinal sequence
    primary_type, alternate_type = role_types
    ordinal = 0
    for mentions, role_type, is_primary in (
        (agents, primary_type, True),
        (successors, alternate_type, False),
    ):
        for mention in mentions:
            ordinal += 1
            builder.add(
                mention.person_name,
                role_type,
                is_primary=is_primary,
                ordinal=ordinal,
                for_person_id=owner_id,
                ancillary_document_id=document_id,
            )


def _add_beneficiary_roles(
    builder: _RoleBuilder,
    beneficiaries: list[ExportBeneficiary],
    trust_id: UUID | None,
) -> None:
    for position, beneficiary in enumerate(beneficiaries, start=1):
        builder.add(
            beneficiary.name,
            RoleType.PRIMARY_BENEFICIARY,
            is_primary=position == 1,
            ordinal=position,
            trust_id=trust_id,
            share_percentage=parse_share(beneficiary.percentage),
        )


def parse_share(percentage: str | None) -> int | None:
    """``"50%"`` -> 50. Leading digits only; values outside 0..100 are ignored."""

    if not percentage:
        return None
    digits = ""
    for char in percentage.replace("%", "").strip():
        if not char.isdigit():
            break
        digits += char
    if not digits:
        return None
    share = int(digits)
    return share if share <= 100 else None


def dedupe_roles(roles: Iterable[PlanRole]) -> list[PlanRole]:
    """Keep the first role per (person, role type, for-person)."""

    seen: set[RoleKey] = set()
    kept: list[PlanRole] = []
    for role in roles:
        if role.key in seen:
            continue
        seen.add(role.key)
        kept.append(role)
    return kept

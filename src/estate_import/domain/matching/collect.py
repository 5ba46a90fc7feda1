"""Walk a parsed export and register every person it names."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from estate_import.domain.matching.contracts import PersonTag

if TYPE_CHECKING:
    from estate_import.domain.export import FiduciaryMention, IndividualFiduciaries, ParsedExport
    from estate_import.domain.matching.extractor import PersonExtractor

CLIENT_LABEL: Final = "Client"
SPOUSE_LABEL: Final = "Spouse"
CHILD_LABEL: Final = "Child"
BENEFICIARY_LABEL: Final = "Beneficiary"


def collect_people(export: ParsedExport, extractor: PersonExtractor) -> PersonExtractor:
    """Register people in a fixed order: principals, family, then fiduciaries.

    Joint grantors are peers, so in a joint trust the spouse is tagged and
    labelled as a client too.
    """

    client = export.client
    extractor.add(
        client.display_name,
        PersonTag.CLIENT,
        [CLIENT_LABEL],
        email=client.email,
        date_of_birth=client.date_of_birth,
        ssn=client.ssn,
    )

    spouse = export.spouse
    if spouse is not None:
        joint = export.is_joint
        extractor.add(
            spouse.display_name,
            PersonTag.CLIENT if joint else PersonTag.SPOUSE,
            [CLIENT_LABEL if joint else SPOUSE_LABEL],
            email=spouse.email,
            date_of_birth=spouse.date_of_birth,
            ssn=spouse.ssn,
        )

    for child in export.children:
        extractor.add(
            child.display_name, PersonTag.CHILD, [CHILD_LABEL], date_of_birth=child.date_of_birth
        )

    for beneficiary in export.beneficiaries:
        extractor.add(beneficiary.name, PersonTag.BENEFICIARY, [BENEFICIARY_LABEL])

    fiduciaries = export.fiduciaries
    _register(extractor, fiduciaries.trustees, "Trustee")
    _register(extractor, fiduciaries.successor_trustees, "Successor Trustee")
    _register(extractor, fiduciaries.trust_protectors, "Trust Protector")
    _register_individual(extractor, fiduciaries.client, CLIENT_LABEL)
    _register_individual(extractor, fiduciaries.spouse, SPOUSE_LABEL)
    return extractor


def _register_individual(
    extractor: PersonExtractor, fiduciaries: IndividualFiduciaries, owner: str
) -> None:
    _register(extractor, fiduciaries.financial_agents, f"Financial Agent ({owner})")
    _register(
        extractor, fiduciaries.financial_agent_successors, f"Successor Financial Agent ({owner})"
    )
    _register(extractor, fiduciaries.healthcare_agents, f"Healthcare Agent ({owner})")
    _register(
        extractor,
        fiduciaries.healthcare_agent_successors,
        f"Successor Healthcare Agent ({owner})",
    )
    _register(extractor, fiduciaries.executors, f"Executor ({owner})")
    _register(extractor, fiduciaries.guardians, f"Guardian ({owner})")


def _register(extractor: PersonExtractor, mentions: list[FiduciaryMention], label: str) -> None:
    for mention in mentions:
        if extractor.has(mention.person_name):
            extractor.add_role(mention.person_name, label)
        else:
            extractor.add(mention.person_name, PersonTag.FIDUCIARY, [label])

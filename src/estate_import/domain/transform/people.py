"""Turn extracted names into Person records and resolve names back to ids."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from estate_import.domain.export import parse_iso_date
from estate_import.domain.model import Person, utcnow
from estate_import.domain.transform.decisions import UseExisting

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from estate_import.domain.export import ExportPerson, ParsedExport
    from estate_import.domain.transform.decisions import DecisionsByName

log = logging.getLogger(__name__)

SOURCE: Final = "WEALTHCOUNSEL"

_NON_DIGIT: Final = re.compile(r"\D")


@dataclass(slots=True, kw_only=True)
class CandidatePerson:
    """A Person that would be created for ``name`` unless a decision links it."""

    name: str
    role: str
    person: Person


@dataclass(slots=True)
class PersonResolution:
    to_create: list[Person] = field(default_factory=list[Person])
    linked: dict[str, UUID] = field(default_factory=dict["str", "UUID"])
    lookup: dict[str, UUID] = field(default_factory=dict["str", "UUID"])

    def person_id(self, name: str | None) -> UUID | None:
        return find_person_id(name, self.lookup)


def ssn_last4(ssn: str | None) -> str | None:
    digits = _NON_DIGIT.sub("", ssn or "")
    return digits[-4:] if len(digits) >= 4 else None


def candidate_people(export: ParsedExport) -> list[CandidatePerson]:
    """Every distinct person the export names, deduplicated case-insensitively."""

    candidates: list[CandidatePerson] = []
    seen: set[str] = set()

    def push(candidate: CandidatePerson) -> None:
        key = candidate.name.lower()
        if key in seen:
            return
        seen.add(key)
        candidates.append(candidate)

    if client := _principal_candidate(export.client, "client"):
        push(client)
    if export.spouse is not None and (spouse := _principal_candidate(export.spouse, "spouse")):
        push(spouse)
    for child in export.children:
        if child_candidate := _principal_candidate(child, "child"):
            push(child_candidate)

    for beneficiary in export.beneficiaries:
        notes = f"Relationship: {beneficiary.relationship}" if beneficiary.relationship else None
        push(
            CandidatePerson(
                name=beneficiary.name,
                role="beneficiary",
                person=Person(
                    full_name=beneficiary.name,
                    address=beneficiary.address,
                    notes=notes,
                    import_metadata=_metadata("beneficiary"),
                ),
            )
        )

    for mention in export.fiduciaries.all():
        first, _, rest = mention.person_name.strip().partition(" ")
        push(
            CandidatePerson(
                name=mention.person_name,
                role=mention.role_type.value,
                person=Person(
                    first_name=first,
                    last_name=rest or None,
                    full_name=mention.person_name,
                    import_metadata=_metadata(mention.role_type.value),
                ),
            )
        )
    return candidates


def _principal_candidate(source: ExportPerson, role: str) -> CandidatePerson | None:
    name = source.display_name
    if name is None:
        return None
    masked = f"****{last4}" if (last4 := ssn_last4(source.ssn)) else None
    person = Person(
        first_name=source.first_name,
        last_name=source.last_name,
        middle_name=source.middle_name,
        full_name=name,
        email=source.email,
        phone=source.phone or source.cell_phone,
        address=source.address,
        city=source.city,
        state=source.state,
        zip_code=source.zip_code,
        date_of_birth=parse_iso_date(source.date_of_birth),
        ssn_last4=last4,
        import_metadata=_metadata(
            role,
            original_ssn=masked,
            county=source.county,
            work_phone=source.work_phone,
            cell_phone=source.cell_phone,
            date_of_death=source.date_of_death,
        ),
    )
    return CandidatePerson(name=name, role=role, person=person)


def _metadata(role: str, **extra: str | None) -> dict[str, object]:
    metadata: dict[str, object] = {
        "source": SOURCE,
        "role": role,
        "imported_at": utcnow().isoformat(),
    }
    metadata.update({key: value for key, value in extra.items() if value is not None})
    return metadata


def resolve_people(
    candidates: Iterable[CandidatePerson],
    decisions: DecisionsByName,
) -> PersonResolution:
    """Apply decisions by extracted name. No decision means create.

    Candidates are distinct case-insensitively while the preview lists every
    spelling, so a link chosen for any spelling of a name applies to it.
    """

    links_by_folded_name: dict[str, UseExisting] = {}
    for name, decision in decisions.items():
        if isinstance(decision, UseExisting):
            links_by_folded_name.setdefault(name.casefold(), decision)

    resolution = PersonResolution()
    for candidate in candidates:
        decision = decisions.get(candidate.name)
        if not isinstance(decision, UseExisting):
            decision = links_by_folded_name.get(candidate.name.casefold(), decision)
        if isinstance(decision, UseExisting):
            resolution.linked[candidate.name] = decision.person_id
            resolution.lookup[candidate.name] = decision.person_id
            continue
        resolution.to_create.append(candidate.person)
        resolution.lookup.setdefault(candidate.name, candidate.person.id)
        for key, person_id in build_person_lookup([candidate.person]).items():
            resolution.lookup.setdefault(key, person_id)
    return resolution


def build_person_lookup(people: Iterable[Person]) -> dict[str, UUID]:
    """Index people by full name and by "first last"."""

    lookup: dict[str, UUID] = {}
    for person in people:
        if person.full_name:
            lookup[person.full_name] = person.id
        if person.first_name and person.last_name:
            lookup[f"{person.first_name} {person.last_name}"] = person.id
    return lookup


def find_person_id(name: str | None, lookup: Mapping[str, UUID]) -> UUID | None:
    """Exact, then case-insensitive, then every-word containment."""

    if not name:
        return None
    if name in lookup:
        return lookup[name]

    lowered = name.lower()
    for key, person_id in lookup.items():
        if key.lower() == lowered:
            return person_id

    words = lowered.split()
    for key, person_id in lookup.items():
        key_lower = key.lower()
        if all(word in key_lower for word in words):
            log.debug("Resolved %r to %r by word containment", name, key)
            return person_id
    return None

"""Per-import registry of every distinct person named in an export."""

from __future__ import annotations

from typing import TYPE_CHECKING

from estate_import.domain.matching.contracts import ExtractedPerson
from estate_import.domain.matching.scoring import DEFAULT_MATCH_LIMIT, find_matches

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from estate_import.domain.matching.contracts import PersonTag
    from estate_import.domain.ports import PersonRegistry


class PersonExtractor:
    """Collects extracted people keyed by exact name.

    Create one per import. Registering a name twice merges its role labels
    into the first record instead of creating a second one.
    """

    def __init__(self, registry: PersonRegistry | None = None) -> None:
        self._registry = registry
        self._people: dict[str, ExtractedPerson] = {}

    def add(
        self,
        name: str | None,
        tag: PersonTag,
        roles: Iterable[str],
        *,
        email: str | None = None,
        date_of_birth: str | None = None,
        ssn: str | None = None,
    ) -> None:
        if not name:
            return
        person = self._people.get(name)
        if person is None:
            person = ExtractedPerson(
                name=name,
                tag=tag,
                email=email,
                date_of_birth=date_of_birth,
                ssn=ssn,
            )
            self._people[name] = person
        for role in roles:
            if role not in person.roles_in_plan:
                person.roles_in_plan.append(role)

    def add_role(self, name: str | None, role: str) -> None:
        """Append one role label to an already registered person."""
        if not name:
            return
        person = self._people.get(name)
        if person is not None and role not in person.roles_in_plan:
            person.roles_in_plan.append(role)

    def get(self, name: str) -> ExtractedPerson | None:
        return self._people.get(name)

    def has(self, name: str) -> bool:
        return name in self._people

    def roles_for(self, name: str) -> list[str]:
        person = self._people.get(name)
        return list(person.roles_in_plan) if person else []

    def by_tag(self, tag: PersonTag) -> list[ExtractedPerson]:
        return [person for person in self._people.values() if person.tag is tag]

    @property
    def count(self) -> int:
        return len(self._people)

    def all(self) -> list[ExtractedPerson]:
        return list(self._people.values())

    def __iter__(self) -> Iterator[ExtractedPerson]:
        return iter(list(self._people.values()))

    def __len__(self) -> int:
        return len(self._people)

    def find_all_matches(
        self,
        *,
        limit: int = DEFAULT_MATCH_LIMIT,
        min_confidence: int = 0,
    ) -> None:
        """Populate ``matches`` on every registered person."""
        if self._registry is None:
            raise RuntimeError("PersonExtractor has no registry to match against")
        for person in self._people.values():
            person.matches = find_matches(
                self._registry,
                person.as_query(),
                limit=limit,
                min_confidence=min_confidence,
            )

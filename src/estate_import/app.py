"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from estate_import.adapters.memory import InMemorySessionCache
from estate_import.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    is_started,
    startup,
)
from estate_import.adapters.wealthcounsel import CachedParseSessionStore, WealthCounselParser
from estate_import.config import get_import_config
from estate_import.domain.importing import commit_import, parse_export
from estate_import.domain.matching import best_match, is_high_confidence
from estate_import.domain.ports.unit_of_work import EstateUnitOfWork
from estate_import.domain.transform import CreateNew, UseExisting

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from estate_import.config import ImportConfig
    from estate_import.domain.importing import ImportResult, ParseResult
    from estate_import.domain.matching import ExtractedPerson
    from estate_import.domain.ports import ParseSessionStore
    from estate_import.domain.transform import ImportOptions, PersonDecision

UnitOfWorkFactory = Callable[[], EstateUnitOfWork]


log = getLogger(__name__)

# one process, one cache: preview and import share parse sessions
_SESSIONS = CachedParseSessionStore(InMemorySessionCache())


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def preview_export(
    source: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    sessions: ParseSessionStore | None = None,
    config: ImportConfig | None = None,
    match_limit: int | None = None,
) -> ParseResult:
    """Parse an export and suggest registry matches without writing anything."""

    effective_config = config or get_import_config()
    result = parse_export(
        source,
        parser=WealthCounselParser(),
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        sessions=sessions or _SESSIONS,
        match_limit=match_limit or effective_config.match_limit,
        session_ttl_seconds=effective_config.session_ttl_seconds,
    )
    log.info(
        "Previewed export: %s, %s, %d people",
        result.summary.client_summary,
        result.summary.plan_summary,
        len(result.people),
    )
    return result


def decide_people(
    people: Iterable[ExtractedPerson],
    *,
    overrides: Mapping[str, PersonDecision] | None = None,
    link_threshold: int | None = None,
) -> dict[str, PersonDecision]:
    """Explicit decisions win; otherwise link to a strong enough best match, else create."""

    decisions: dict[str, PersonDecision] = {}
    explicit = overrides or {}
    for person in people:
        if person.name in explicit:
            decisions[person.name] = explicit[person.name]
            continue
        candidate = best_match(person.matches)
        if (
            link_threshold is not None
            and candidate is not None
            and is_high_confidence(candidate, link_threshold)
        ):
            log.info(
                "Linking %r to existing person %s (%s, %d)",
                person.name,
                candidate.person_id,
                candidate.match_type,
                candidate.confidence,
            )
            decisions[person.name] = UseExisting(candidate.person_id)
        else:
            decisions[person.name] = CreateNew()
    return decisions


def import_export(
    source: str,
    *,
    overrides: Mapping[str, PersonDecision] | None = None,
    link_threshold: int | None = None,
    options: ImportOptions | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    sessions: ParseSessionStore | None = None,
    config: ImportConfig | None = None,
) -> ImportResult:
    """Parse and commit an export in one go, deciding people automatically."""

    effective_config = config or get_import_config()
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_sessions = sessions or _SESSIONS

    preview = preview_export(
        source,
        unit_of_work_factory=effective_uow,
        sessions=effective_sessions,
        config=effective_config,
    )
    decisions = decide_people(
        preview.people,
        overrides=overrides,
        link_threshold=link_threshold,
    )
    result = commit_import(
        preview.session_id,
        decisions,
        unit_of_work_factory=effective_uow,
        sessions=effective_sessions,
        options=options,
    )

    log.info(
        f"Finished import: plan={result.plan_id}, version={result.version_number}, "
        f"people_created={result.people_created}, people_linked={result.people_linked}, "
        f"roles={result.roles_created}, role_errors={len(result.role_failures)}"
    )
    return result

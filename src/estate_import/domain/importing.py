"""Application services for importing estate plan exports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from estate_import.domain.export import extract_export, summarize_export
from estate_import.domain.integrity import (
    ensure_ancillary_document,
    ensure_client,
    ensure_plan,
    ensure_plan_role,
    ensure_trust,
    ensure_will,
)
from estate_import.domain.matching import PersonExtractor, best_match, collect_people
from estate_import.domain.model import (
    Client,
    ClientStatus,
    MatterRelationshipType,
    PlanMatterLink,
    PlanStatus,
    PlanStatusError,
    utcnow,
)
from estate_import.domain.ports import ParseSession
from estate_import.domain.transform import (
    DocumentIndex,
    ImportOptions,
    TransformError,
    amend_plan,
    transform_export,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from estate_import.domain.export import ExportSummary, ParsedExport
    from estate_import.domain.matching import ExtractedPerson, MatchCandidate
    from estate_import.domain.model import EstatePlan, PlanRole
    from estate_import.domain.ports import (
        EstateRepositories,
        EstateUnitOfWork,
        ExportParser,
        ParseSessionStore,
    )
    from estate_import.domain.transform import DecisionsByName, TransformResult

log = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS: Final = 3600
DEFAULT_MATCH_LIMIT: Final = 5
EXISTING_PLAN_LIMIT: Final = 5


class SessionExpired(LookupError):
    """The parse session is unknown or its cache entry has expired."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Parse session {session_id!r} expired or not found; re-parse the export")
        self.session_id = session_id


class RoleCreationError(RuntimeError):
    """One role could not be stored. Collected, never raised out of an import."""

    def __init__(self, role: PlanRole, cause: Exception) -> None:
        super().__init__(f"Failed to create role: {cause}")
        self.role = role
        self.cause = cause


@dataclass(slots=True)
class ExistingPlanSummary:
    plan_id: UUID
    plan_name: str
    status: PlanStatus


@dataclass(slots=True, kw_only=True)
class ParseResult:
    """Preview of an export plus match suggestions, keyed by a resumable session id."""

    session_id: str
    export: ParsedExport
    summary: ExportSummary
    people: list[ExtractedPerson]
    client_match: MatchCandidate | None = None
    spouse_match: MatchCandidate | None = None
    existing_plans: list[ExistingPlanSummary] = field(
        default_factory=list[ExistingPlanSummary]
    )


@dataclass(slots=True)
class ImportResult:
    """Outcome of a commit; also the partial result carried by ``ImportFailed``."""

    success: bool = False
    plan_id: UUID | None = None
    version_id: UUID | None = None
    version_number: int | None = None
    people_created: int = 0
    people_linked: int = 0
    clients_created: int = 0
    roles_created: int = 0
    errors: list[str] = field(default_factory=list[str])
    role_failures: list[RoleCreationError] = field(default_factory=list[RoleCreationError])


class ImportFailed(RuntimeError):
    """A fatal failure after writes had started. ``result`` holds what was stored."""

    def __init__(self, result: ImportResult, cause: Exception) -> None:
        super().__init__(f"Import failed: {cause}")
        self.result = result
        self.cause = cause


def parse_export(
    source: str,
    *,
    parser: ExportParser,
    unit_of_work_factory: Callable[[], EstateUnitOfWork],
    sessions: ParseSessionStore,
    match_limit: int = DEFAULT_MATCH_LIMIT,
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
) -> ParseResult:
    """Parse, preview and match an export, then park it in a parse session.

    Raises ``ParseError`` for malformed markup; everything else degrades to
    absent values in the preview.
    """

    fields = parser(source)
    export = extract_export(fields)
    summary = summarize_export(export)
    log.info("Parsed export with %d fields: %s", len(fields), summary.client_summary)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        extractor = collect_people(export, PersonExtractor(repositories.people))
        extractor.find_all_matches(limit=match_limit)
        people = extractor.all()

        client = extractor.get(export.client.display_name or "")
        spouse = extractor.get(export.spouse.display_name or "") if export.spouse else None
        existing_plans = _existing_plans(repositories, client)

    session = ParseSession(session_id=uuid4().hex, fields=fields, source=source)
    sessions.save(session, ttl_seconds=session_ttl_seconds)
    log.info("Stored parse session %s for %d people", session.session_id, len(people))

    return ParseResult(
        session_id=session.session_id,
        export=export,
        summary=summary,
        people=people,
        client_match=best_match(client.matches) if client else None,
        spouse_match=best_match(spouse.matches) if spouse else None,
        existing_plans=existing_plans,
    )


def _existing_plans(
    repositories: EstateRepositories,
    client: ExtractedPerson | None,
) -> list[ExistingPlanSummary]:
    if client is None:
        return []
    summaries: list[ExistingPlanSummary] = []
    for candidate in client.matches:
        for plan in repositories.plans.plans_for_grantor(
            candidate.person_id, limit=EXISTING_PLAN_LIMIT
        ):
            summaries.append(
                ExistingPlanSummary(plan.id, plan.plan_name or "Unnamed Plan", plan.status)
            )
    return summaries


def load_session(session_id: str, sessions: ParseSessionStore) -> ParseSession:
    session = sessions.load(session_id)
    if session is None:
        raise SessionExpired(session_id)
    return session


def commit_import(
    session_id: str,
    decisions: DecisionsByName,
    *,
    unit_of_work_factory: Callable[[], EstateUnitOfWork],
    sessions: ParseSessionStore,
    options: ImportOptions | None = None,
    at: datetime | None = None,
) -> ImportResult:
    """Store the people, plan and roles of a parsed session.

    Writes happen in dependency order and each stage commits on its own.
    Failures before the first write (expired session, unresolvable people,
    unknown or closed plan) raise without touching the store. Later fatal
    failures raise ``ImportFailed`` with the partial result; single role
    failures are only collected.
    """

    options = options or ImportOptions()
    when = at or utcnow()
    session = load_session(session_id, sessions)
    export = extract_export(session.fields)
    result = ImportResult()

    with unit_of_work_factory() as uow:
        existing_plan, documents = _load_existing_plan(uow.repositories, options)
        transformed = transform_export(
            export,
            decisions,
            existing_plan=existing_plan,
            documents=documents,
            source_markup=session.source,
            at=when,
        )
        if existing_plan is not None:
            result.plan_id = existing_plan.id
        result.people_linked = len(transformed.people.linked)

        try:
            _store_people(uow, transformed, result)
            if options.create_client_records:
                _store_clients(uow, export, transformed, result, when)
            if existing_plan is None:
                _store_plan_aggregate(uow, transformed, result)
            else:
                _store_amendment(uow, existing_plan, export, session.source, result, when)
            _store_roles(uow, transformed.roles, result)
            if options.link_to_matter_id:
                _store_matter_link(uow, transformed.plan_id, options)
        except Exception as exc:
            uow.rollback()
            result.errors.append(str(exc))
            log.exception("Import of session %s failed after writes started", session_id)
            raise ImportFailed(result, exc) from exc

    sessions.discard(session_id)
    result.success = True
    log.info(
        "Imported plan %s v%s: %d people created, %d linked, %d roles, %d role errors",
        result.plan_id,
        result.version_number,
        result.people_created,
        result.people_linked,
        result.roles_created,
        len(result.role_failures),
    )
    return result


def _load_existing_plan(
    repositories: EstateRepositories,
    options: ImportOptions,
) -> tuple[EstatePlan | None, DocumentIndex | None]:
    if not options.is_amendment or options.existing_plan_id is None:
        return None, None
    plans = repositories.plans
    plan = plans.get_plan(options.existing_plan_id)
    if plan is None:
        raise TransformError(f"existing plan {options.existing_plan_id} not found")
    if not plan.can_transition_to(PlanStatus.AMENDED):
        raise PlanStatusError(current=plan.status, requested=PlanStatus.AMENDED)
    documents = DocumentIndex.from_records(
        plans.trusts_for_plan(plan.id),
        plans.wills_for_plan(plan.id),
        plans.documents_for_plan(plan.id),
    )
    return plan, documents


def _store_people(
    uow: EstateUnitOfWork,
    transformed: TransformResult,
    result: ImportResult,
) -> None:
    people = uow.repositories.people
    for person in transformed.people.to_create:
        people.add(person)
        result.people_created += 1
    uow.commit()
    log.info("Stored %d new people", result.people_created)


def _store_clients(
    uow: EstateUnitOfWork,
    export: ParsedExport,
    transformed: TransformResult,
    result: ImportResult,
    at: datetime,
) -> None:
    repositories = uow.repositories
    children = [child.display_name for child in export.children if child.display_name]
    for person_id in (transformed.client_person_id, transformed.spouse_person_id):
        if person_id is None or repositories.clients.get_by_person(person_id) is not None:
            continue
        client = Client(
            person_id=person_id,
            status=ClientStatus.ACTIVE,
            has_minor_children=bool(children),
            children_info=", ".join(children) or None,
            has_trust=export.trust is not None,
            has_will=bool(export.will.personal_rep_names) or export.trust is None,
            import_metadata={"source": "WEALTHCOUNSEL", "imported_at": at.isoformat()},
        )
        ensure_client(client, repositories.people)
        repositories.clients.add(client)
        result.clients_created += 1
    uow.commit()


def _store_plan_aggregate(
    uow: EstateUnitOfWork,
    transformed: TransformResult,
    result: ImportResult,
) -> None:
    aggregate = transformed.aggregate
    if aggregate is None:
        raise TransformError("no plan aggregate to store")
    people = uow.repositories.people
    plans = uow.repositories.plans

    ensure_plan(aggregate.plan, people)
    plans.add_plan(aggregate.plan)
    if aggregate.trust is not None:
        ensure_trust(aggregate.trust, plans)
        plans.add_trust(aggregate.trust)
    for will in aggregate.wills:
        ensure_will(will, plans, people)
        plans.add_will(will)
    for document in aggregate.documents:
        ensure_ancillary_document(document, plans, people)
        plans.add_document(document)
    plans.add_version(aggregate.version)
    plans.add_event(aggregate.event)
    uow.commit()

    result.plan_id = aggregate.plan.id
    result.version_id = aggregate.version.id
    result.version_number = aggregate.version.version
    log.info("Stored plan %s (%s)", aggregate.plan.id, aggregate.plan.status)


def _store_amendment(
    uow: EstateUnitOfWork,
    plan: EstatePlan,
    export: ParsedExport,
    source: str | None,
    result: ImportResult,
    at: datetime,
) -> None:
    plans = uow.repositories.plans
    version, event = amend_plan(plan, export, source_markup=source, at=at)
    plans.update_plan(plan)
    plans.add_version(version)
    plans.add_event(event)
    uow.commit()

    result.version_id = version.id
    result.version_number = version.version
    log.info("Amended plan %s to version %d", plan.id, version.version)


def _store_roles(uow: EstateUnitOfWork, roles: list[PlanRole], result: ImportResult) -> None:
    people = uow.repositories.people
    plans = uow.repositories.plans
    for role in roles:
        try:
            ensure_plan_role(role, plans, people)
            plans.add_role(role)
            uow.commit()
        except Exception as exc:  # noqa: BLE001
            uow.rollback()
            failure = RoleCreationError(role, exc)
            result.role_failures.append(failure)
            result.errors.append(str(failure))
            log.warning("Skipping %s role for person %s: %s", role.role_type, role.person_id, exc)
            continue
        result.roles_created += 1


def _store_matter_link(uow: EstateUnitOfWork, plan_id: UUID, options: ImportOptions) -> None:
    if options.link_to_matter_id is None:
        return
    link = PlanMatterLink(
        plan_id=plan_id,
        matter_id=options.link_to_matter_id,
        relationship_type=(
            MatterRelationshipType.AMENDMENT
            if options.is_amendment
            else MatterRelationshipType.CREATION
        ),
    )
    uow.repositories.plans.add_matter_link(link)
    uow.commit()

"""Turn a parsed export plus person decisions into records ready to store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from estate_import.domain.transform.errors import TransformError
from estate_import.domain.transform.people import candidate_people, resolve_people
from estate_import.domain.transform.plan import build_plan_aggregate
from estate_import.domain.transform.roles import DocumentIndex, build_roles

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from estate_import.domain.export import ParsedExport
    from estate_import.domain.model import EstatePlan, PlanRole
    from estate_import.domain.transform.decisions import DecisionsByName
    from estate_import.domain.transform.people import PersonResolution
    from estate_import.domain.transform.plan import PlanAggregate

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class TransformResult:
    people: PersonResolution
    plan_id: UUID
    client_person_id: UUID
    spouse_person_id: UUID | None = None
    aggregate: PlanAggregate | None = None
    roles: list[PlanRole] = field(default_factory=list["PlanRole"])
    version: int = 1


def transform_export(
    export: ParsedExport,
    decisions: DecisionsByName,
    *,
    existing_plan: EstatePlan | None = None,
    documents: DocumentIndex | None = None,
    source_markup: str | None = None,
    at: datetime | None = None,
) -> TransformResult:
    """Resolve people, then build a new plan aggregate or roles for ``existing_plan``.

    Nothing is persisted here. Raises ``TransformError`` when the client, or a
    named spouse, has no resolvable id.
    """

    client_name = export.client.display_name
    if client_name is None:
        raise TransformError("export names no client")

    resolution = resolve_people(candidate_people(export), decisions)
    client_person_id = resolution.person_id(client_name)
    if client_person_id is None:
        raise TransformError(f"could not resolve client {client_name!r}")

    spouse_person_id: UUID | None = None
    if export.spouse is not None and (spouse_name := export.spouse.display_name):
        spouse_person_id = resolution.person_id(spouse_name)
        if spouse_person_id is None:
            raise TransformError(f"could not resolve spouse {spouse_name!r}")

    aggregate: PlanAggregate | None = None
    if existing_plan is None:
        aggregate = build_plan_aggregate(
            export,
            client_person_id=client_person_id,
            spouse_person_id=spouse_person_id,
            source_markup=source_markup,
            at=at,
        )
        plan_id = aggregate.plan.id
        version = 1
        index = DocumentIndex.from_records(
            [aggregate.trust] if aggregate.trust else [],
            aggregate.wills,
            aggregate.documents,
        )
    else:
        plan_id = existing_plan.id
        version = existing_plan.current_version + 1
        index = documents or DocumentIndex()

    roles = build_roles(
        export,
        plan_id=plan_id,
        lookup=resolution.lookup,
        client_person_id=client_person_id,
        spouse_person_id=spouse_person_id,
        documents=index,
        version=version,
    )
    log.debug(
        "Transformed export: %d people to create, %d linked, %d roles",
        len(resolution.to_create),
        len(resolution.linked),
        len(roles),
    )
    return TransformResult(
        people=resolution,
        plan_id=plan_id,
        client_person_id=client_person_id,
        spouse_person_id=spouse_person_id,
        aggregate=aggregate,
        roles=roles,
        version=version,
    )

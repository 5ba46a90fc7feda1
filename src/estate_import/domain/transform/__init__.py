"""Domain transformer: export plus decisions in, unsaved estate records out."""

from __future__ import annotations

from .decisions import (
    CreateNew,
    DecisionAction,
    DecisionsByName,
    ImportOptions,
    PersonDecision,
    UseExisting,
)
from .errors import TransformError
from .people import (
    CandidatePerson,
    PersonResolution,
    build_person_lookup,
    candidate_people,
    find_person_id,
    resolve_people,
    ssn_last4,
)
from .plan import (
    PlanAggregate,
    amend_plan,
    build_plan_aggregate,
    build_version,
    effective_date_for,
    map_trust_type,
    plan_name_for,
)
from .roles import DocumentIndex, build_roles, dedupe_roles, parse_share
from .transformer import TransformResult, transform_export

__all__ = [
    "CandidatePerson",
    "CreateNew",
    "DecisionAction",
    "DecisionsByName",
    "DocumentIndex",
    "ImportOptions",
    "PersonDecision",
    "PersonResolution",
    "PlanAggregate",
    "TransformError",
    "TransformResult",
    "UseExisting",
    "amend_plan",
    "build_person_lookup",
    "build_plan_aggregate",
    "build_roles",
    "build_version",
    "candidate_people",
    "dedupe_roles",
    "effective_date_for",
    "find_person_id",
    "map_trust_type",
    "parse_share",
    "plan_name_for",
    "resolve_people",
    "ssn_last4",
    "transform_export",
]

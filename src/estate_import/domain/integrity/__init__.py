"""Structural rules every stored estate record must satisfy."""

from __future__ import annotations

from .errors import (
    IdentityViolation,
    InvariantViolation,
    PlanAggregateViolation,
    RelationshipViolation,
)
from .rules import (
    IntegrityReport,
    PersonLookup,
    PlanGraphLookup,
    PlanLookup,
    ensure_ancillary_document,
    ensure_client,
    ensure_plan,
    ensure_plan_role,
    ensure_relationship,
    ensure_trust,
    ensure_user,
    ensure_will,
    verify_client,
    verify_plan,
)

__all__ = [
    "IdentityViolation",
    "IntegrityReport",
    "InvariantViolation",
    "PersonLookup",
    "PlanAggregateViolation",
    "PlanGraphLookup",
    "PlanLookup",
    "RelationshipViolation",
    "ensure_ancillary_document",
    "ensure_client",
    "ensure_plan",
    "ensure_plan_role",
    "ensure_relationship",
    "ensure_trust",
    "ensure_user",
    "ensure_will",
    "verify_client",
    "verify_plan",
]

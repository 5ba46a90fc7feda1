"""Reusable builders and fakes for estate-graph tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from estate_import.domain.model import EstatePlan, Person, PlanStatus, PlanType

if TYPE_CHECKING:
    from datetime import date, datetime

    from estate_import.domain.ports import PersonRegistry, PlanStore


def make_person(
    name: str = "Example Person",
    *,
    email: str | None = None,
    date_of_birth: date | None = None,
    ssn_last4: str | None = None,
) -> Person:
    """Create a person whose first and last name are split from ``name``."""

    first, _, last = name.partition(" ")
    return Person(
        first_name=first,
        last_name=last or None,
        full_name=name,
        email=email,
        date_of_birth=date_of_birth,
        ssn_last4=ssn_last4,
    )


def make_plan(
    grantor: Person,
    *,
    spouse: Person | None = None,
    status: PlanStatus = PlanStatus.ACTIVE,
    plan_name: str = "Example Family Trust",
    updated_at: datetime | None = None,
) -> EstatePlan:
    plan = EstatePlan(
        grantor_person_id_1=grantor.id,
        grantor_person_id_2=spouse.id if spouse else None,
        plan_type=PlanType.TRUST_BASED,
        plan_name=plan_name,
        status=status,
    )
    if updated_at is not None:
        plan.updated_at = updated_at
    return plan


def seed_plan(
    people: PersonRegistry,
    plans: PlanStore,
    *,
    grantor_name: str = "Example Grantor",
    status: PlanStatus = PlanStatus.ACTIVE,
) -> tuple[Person, EstatePlan]:
    """Store a grantor and a plan naming them."""

    grantor = make_person(grantor_name)
    people.add(grantor)
    plan = make_plan(grantor, status=status)
    plans.add_plan(plan)
    return grantor, plan


@dataclass
class FakeClock:
    """Monotonic clock stand-in; advance it by hand."""

    now: float = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

"""SQLAlchemy adapter package for estate plan imports."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyPersonRepository,
    SqlAlchemyPlanStore,
    SqlAlchemyRelationshipRepository,
    SqlAlchemyUserRepository,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyClientRepository",
    "SqlAlchemyPersonRepository",
    "SqlAlchemyPlanStore",
    "SqlAlchemyRelationshipRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUserRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "startup",
]

"""Domain port definitions for adapters."""

from __future__ import annotations

from .parsing import ExportParser
from .persistence import (
    ClientRepository,
    PersonRegistry,
    PlanStore,
    RelationshipRepository,
    Repository,
    UserRepository,
)
from .sessions import ParseSession, ParseSessionStore, SessionCache
from .unit_of_work import (
    EstateRepositories,
    EstateUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ClientRepository",
    "EstateRepositories",
    "EstateUnitOfWork",
    "ExportParser",
    "ParseSession",
    "ParseSessionStore",
    "PersonRegistry",
    "PlanStore",
    "RelationshipRepository",
    "Repository",
    "RepositoryCollection",
    "SessionCache",
    "UnitOfWork",
    "UserRepository",
]

"""Unit of work over the in-memory entity graph."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from estate_import.adapters.memory.store import (
    InMemoryClientRepository,
    InMemoryEstateStore,
    InMemoryPersonRegistry,
    InMemoryRelationshipRepository,
    InMemoryUserRepository,
)
from estate_import.domain.ports.unit_of_work import EstateRepositories

if TYPE_CHECKING:
    from types import TracebackType


class InMemoryUnitOfWork:
    """Commit keeps a snapshot of the store; rollback and exit return to it.

    Writes that were never committed are discarded on exit, as a closed
    database session would discard them.
    """

    def __init__(self, store: InMemoryEstateStore | None = None) -> None:
        self.store = store or InMemoryEstateStore()
        self.repositories = EstateRepositories(
            people=InMemoryPersonRegistry(self.store),
            users=InMemoryUserRepository(self.store),
            clients=InMemoryClientRepository(self.store),
            relationships=InMemoryRelationshipRepository(self.store),
            plans=self.store,
        )
        self._committed = self.store.snapshot()
        self.commits = 0
        self.rollbacks = 0

    def __enter__(self) -> InMemoryUnitOfWork:
        self._committed = self.store.snapshot()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        else:
            self.store.restore(self._committed)
        return False

    def commit(self) -> None:
        self._committed = self.store.snapshot()
        self.commits += 1

    def rollback(self) -> None:
        self.store.restore(self._committed)
        self.rollbacks += 1


if TYPE_CHECKING:
    from estate_import.domain.ports import EstateUnitOfWork

    _uow_check: EstateUnitOfWork = InMemoryUnitOfWork()

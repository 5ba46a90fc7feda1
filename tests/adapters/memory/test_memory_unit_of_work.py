from __future__ import annotations

import pytest

from estate_import.adapters.memory import InMemoryEstateStore, InMemoryUnitOfWork
from estate_import.domain.ports import EstateRepositories, PersonRegistry, PlanStore
from tests.helpers.estate import make_person


def test_repositories_share_the_store(memory_store: InMemoryEstateStore) -> None:
    uow = InMemoryUnitOfWork(memory_store)

    assert isinstance(uow.repositories, EstateRepositories)
    assert isinstance(uow.repositories.people, PersonRegistry)
    assert isinstance(uow.repositories.plans, PlanStore)
    assert uow.repositories.plans is memory_store


def test_commit_keeps_writes(memory_store: InMemoryEstateStore) -> None:
    person = make_person("Committed Person")

    with InMemoryUnitOfWork(memory_store) as uow:
        uow.repositories.people.add(person)
        uow.commit()

    assert uow.commits == 1
    assert memory_store.get_person(person.id) is not None


def test_exit_without_commit_discards_writes(memory_store: InMemoryEstateStore) -> None:
    with InMemoryUnitOfWork(memory_store) as uow:
        uow.repositories.people.add(make_person("Uncommitted Person"))

    assert memory_store.counts()["people"] == 0


def test_rollback_returns_to_last_commit(memory_store: InMemoryEstateStore) -> None:
    kept = make_person("Kept Person")

    with InMemoryUnitOfWork(memory_store) as uow:
        uow.repositories.people.add(kept)
        uow.commit()
        uow.repositories.people.add(make_person("Dropped Person"))
        uow.rollback()
        uow.commit()

    assert uow.rollbacks == 1
    assert memory_store.counts()["people"] == 1
    assert memory_store.get_person(kept.id) is not None


def test_exception_rolls_back_and_propagates(memory_store: InMemoryEstateStore) -> None:
    with pytest.raises(RuntimeError, match="boom"), InMemoryUnitOfWork(memory_store) as uow:
        uow.repositories.people.add(make_person("Failed Person"))
        raise RuntimeError("boom")

    assert uow.rollbacks == 1
    assert memory_store.counts()["people"] == 0


def test_default_store_is_private() -> None:
    first = InMemoryUnitOfWork()
    second = InMemoryUnitOfWork()

    assert first.store is not second.store

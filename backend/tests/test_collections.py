"""
Tests for collection CRUD, the curator reward and fuzzy search.
"""

from datetime import datetime, timezone

import pytest

from moodyflicks.schemas import Achievement, NoticeKind
from moodyflicks.services import store as slots
from moodyflicks.services.collections import (
    CollectionManager,
    CollectionNotFound,
    CollectionValidationError,
)
from moodyflicks.services.state import AppState
from moodyflicks.services.store import MemoryStore

from tests.factories import SteppingClock


@pytest.fixture
def manager(state):
    return CollectionManager(state, clock=SteppingClock())


@pytest.mark.asyncio
async def test_blank_name_is_rejected(state, manager):
    with pytest.raises(CollectionValidationError):
        await manager.create("   ")

    assert state.collections == []
    notices = state.notifier.drain()
    assert notices[-1].kind == NoticeKind.ERROR


@pytest.mark.asyncio
async def test_create_sets_fields(manager):
    collection = await manager.create("  Rainy Sundays ", "Cozy picks")

    assert collection.id.startswith("col_")
    assert collection.name == "Rainy Sundays"
    assert collection.description == "Cozy picks"
    assert collection.movie_ids == []
    assert collection.created_at == collection.updated_at


@pytest.mark.asyncio
async def test_ids_are_unique_with_a_frozen_clock(state):
    frozen = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
    manager = CollectionManager(state, clock=lambda: frozen)

    first = await manager.create("One")
    second = await manager.create("Two")

    assert first.id != second.id


@pytest.mark.asyncio
async def test_duplicate_add_keeps_single_entry(state, manager):
    collection = await manager.create("Favorites")
    assert await manager.add_movie(collection.id, 550) is True
    state.notifier.drain()

    assert await manager.add_movie(collection.id, 550) is False

    assert collection.movie_ids == [550]
    assert [n.title for n in state.notifier.drain()] == ["Already Added"]


@pytest.mark.asyncio
async def test_first_movie_in_any_collection_unlocks_curator(state, manager):
    first = await manager.create("Favorites")
    second = await manager.create("Later")

    await manager.add_movie(first.id, 550)
    await manager.add_movie(second.id, 13)

    assert state.progress.has(Achievement.CURATOR)
    assert state.progress.points == 10


@pytest.mark.asyncio
async def test_no_curator_when_collections_already_hold_movies():
    now = "2026-10-01T10:00:00+00:00"
    store = MemoryStore({
        slots.COLLECTIONS: [
            {"id": "col_1", "name": "Old", "movie_ids": [1], "created_at": now, "updated_at": now},
            {"id": "col_2", "name": "New", "movie_ids": [], "created_at": now, "updated_at": now},
        ]
    })
    state = await AppState.load(store)

    await CollectionManager(state).add_movie("col_2", 2)

    assert not state.progress.has(Achievement.CURATOR)
    assert state.progress.points == 0


@pytest.mark.asyncio
async def test_update_renames_and_advances_timestamp(manager):
    collection = await manager.create("Favorites")
    created = collection.created_at

    updated = await manager.update(collection.id, name="All-time Favorites", description="best")

    assert updated.name == "All-time Favorites"
    assert updated.description == "best"
    assert updated.updated_at > created


@pytest.mark.asyncio
async def test_update_with_blank_name_changes_nothing(manager):
    collection = await manager.create("Favorites")

    with pytest.raises(CollectionValidationError):
        await manager.update(collection.id, name="")

    assert collection.name == "Favorites"


@pytest.mark.asyncio
async def test_updated_at_never_precedes_created_at(state):
    times = iter([
        datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc),
        datetime(2026, 10, 18, 11, 0, tzinfo=timezone.utc),
    ])
    manager = CollectionManager(state, clock=lambda: next(times))
    collection = await manager.create("Favorites")

    await manager.add_movie(collection.id, 1)

    assert collection.updated_at >= collection.created_at


@pytest.mark.asyncio
async def test_unknown_collection_raises(manager):
    with pytest.raises(CollectionNotFound):
        await manager.update("col_missing", name="x")
    with pytest.raises(CollectionNotFound):
        await manager.delete("col_missing")
    with pytest.raises(CollectionNotFound):
        await manager.add_movie("col_missing", 1)


@pytest.mark.asyncio
async def test_delete_and_remove_movie(state, manager):
    keep = await manager.create("Keep")
    drop = await manager.create("Drop")
    await manager.add_movie(keep.id, 1)

    assert await manager.remove_movie(keep.id, 1) is True
    assert await manager.remove_movie(keep.id, 1) is False
    await manager.delete(drop.id)

    assert [c.id for c in state.collections] == [keep.id]
    assert keep.movie_ids == []


@pytest.mark.asyncio
async def test_collections_persist(store, manager):
    collection = await manager.create("Favorites")
    await manager.add_movie(collection.id, 550)

    reloaded = await AppState.load(store)

    assert len(reloaded.collections) == 1
    assert reloaded.collections[0].movie_ids == [550]
    assert reloaded.collections[0].name == "Favorites"


@pytest.mark.asyncio
async def test_fuzzy_search(manager):
    await manager.create("Horror Nights")
    await manager.create("Feel-good Comedies")
    await manager.create("Documentaries")

    results = manager.search("horor nigths")

    assert results
    assert results[0].name == "Horror Nights"
    assert manager.search("") == []

"""
Tests for the progress ledger: points, watched/rated/saved lists, achievements.
"""

import pytest

from moodyflicks.schemas import Achievement, NoticeKind
from moodyflicks.services import store as slots
from moodyflicks.services.ledger import ProgressLedger
from moodyflicks.services.state import AppState
from moodyflicks.services.store import MemoryStore


@pytest.mark.asyncio
async def test_first_watch_awards_ten_points(state):
    ledger = ProgressLedger(state)

    assert await ledger.mark_watched(42) is True

    assert state.progress.points == 10
    assert state.progress.watched_movie_ids == [42]
    assert state.notifier.pending[-1].kind == NoticeKind.SUCCESS


@pytest.mark.asyncio
async def test_watching_same_movie_twice_is_a_no_op(state):
    ledger = ProgressLedger(state)
    await ledger.mark_watched(42)
    state.notifier.drain()

    assert await ledger.mark_watched(42) is False

    assert state.progress.points == 10
    assert state.progress.watched_movie_ids == [42]
    notices = state.notifier.drain()
    assert [n.title for n in notices] == ["Already Watched"]


@pytest.mark.asyncio
async def test_fifth_watch_unlocks_movie_buff(state):
    ledger = ProgressLedger(state)
    for movie_id in (42, 7, 8, 9):
        await ledger.mark_watched(movie_id)
    assert not state.progress.has(Achievement.WATCHED_5)

    await ledger.mark_watched(10)

    assert state.progress.has(Achievement.WATCHED_5)
    assert state.progress.points == 5 * 10 + 50
    kinds = [n.kind for n in state.notifier.drain()]
    assert kinds.count(NoticeKind.ACHIEVEMENT) == 1


@pytest.mark.asyncio
async def test_movie_buff_only_fires_on_exact_transition():
    store = MemoryStore({slots.WATCHED: [1, 2, 3, 4, 5], slots.POINTS: 50})
    state = await AppState.load(store)

    await ProgressLedger(state).mark_watched(6)

    assert not state.progress.has(Achievement.WATCHED_5)
    assert state.progress.points == 60


@pytest.mark.asyncio
async def test_tenth_rating_unlocks_critic(state):
    ledger = ProgressLedger(state)
    for movie_id in range(1, 11):
        await ledger.rate_movie(movie_id, liked=movie_id % 2 == 0)

    assert state.progress.has(Achievement.CRITIC)
    assert state.progress.points == 10 * 5 + 30


@pytest.mark.asyncio
async def test_rating_twice_keeps_points(state):
    ledger = ProgressLedger(state)
    await ledger.rate_movie(3, liked=True)

    assert await ledger.rate_movie(3, liked=False) is False
    assert state.progress.points == 5
    assert state.progress.rated_movie_ids == [3]


@pytest.mark.asyncio
async def test_save_points_only_when_watchlist_was_empty(state):
    ledger = ProgressLedger(state)

    assert await ledger.toggle_saved(1) is True
    assert await ledger.toggle_saved(2) is True
    assert state.progress.points == 5

    assert await ledger.toggle_saved(1) is False
    assert await ledger.toggle_saved(2) is False
    assert state.progress.saved_movie_ids == []

    await ledger.toggle_saved(3)
    assert state.progress.points == 10


@pytest.mark.asyncio
async def test_tenth_save_unlocks_collector(state):
    ledger = ProgressLedger(state)
    for movie_id in range(1, 11):
        await ledger.toggle_saved(movie_id)

    assert state.progress.has(Achievement.COLLECTOR)
    assert state.progress.points == 5 + 25


@pytest.mark.asyncio
async def test_unlock_is_idempotent(state):
    ledger = ProgressLedger(state)

    assert await ledger.unlock_achievement(Achievement.CURATOR) is True
    assert await ledger.unlock_achievement(Achievement.CURATOR) is False

    assert state.progress.achievements == [Achievement.CURATOR]
    achievements = [n for n in state.notifier.drain() if n.kind == NoticeKind.ACHIEVEMENT]
    assert len(achievements) == 1


@pytest.mark.asyncio
async def test_award_points_ignores_non_positive(state):
    ledger = ProgressLedger(state)

    assert await ledger.award_points(0) == 0
    assert await ledger.award_points(-20) == 0
    assert await ledger.award_points(7) == 7


@pytest.mark.asyncio
async def test_first_share_only(state):
    ledger = ProgressLedger(state)

    assert await ledger.record_share(550) is True
    assert await ledger.record_share(551) is False

    assert state.progress.points == 15
    assert state.progress.has(Achievement.SHARING)


@pytest.mark.asyncio
async def test_summary_level_and_completion(state):
    ledger = ProgressLedger(state)
    for movie_id in range(1, 6):
        await ledger.mark_watched(movie_id)
    await ledger.award_points(150)

    summary = ledger.summary()

    assert summary.points == 250
    assert summary.level == 3
    assert summary.total_achievements == 1
    assert summary.completion_percentage == 25


@pytest.mark.asyncio
async def test_completion_caps_at_one_hundred():
    state = await AppState.load(MemoryStore({slots.WATCHED: list(range(1, 31))}))
    assert ProgressLedger(state).summary().completion_percentage == 100


@pytest.mark.asyncio
async def test_mutations_persist_across_reload(store, state):
    ledger = ProgressLedger(state)
    await ledger.mark_watched(42)
    await ledger.rate_movie(42, liked=True)
    await ledger.toggle_saved(42)

    reloaded = await AppState.load(store)

    assert reloaded.progress.points == 20
    assert reloaded.progress.watched_movie_ids == [42]
    assert reloaded.progress.rated_movie_ids == [42]
    assert reloaded.progress.saved_movie_ids == [42]


@pytest.mark.asyncio
async def test_unknown_achievements_are_dropped_on_load():
    store = MemoryStore({slots.ACHIEVEMENTS: ["critic", "time-traveller", "critic"]})
    state = await AppState.load(store)
    assert state.progress.achievements == [Achievement.CRITIC]

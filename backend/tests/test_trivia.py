"""
Tests for trivia facts and trivia likes.
"""

import random

import pytest

from moodyflicks.services.state import AppState
from moodyflicks.services.trivia import (
    FALLBACK_FACT,
    GENERAL_TRIVIA,
    MOOD_TRIVIA,
    TriviaService,
    mood_facts,
    movie_facts,
)

from tests.factories import FakeCatalog, make_movie


def _fight_club():
    return make_movie(
        550,
        title="Fight Club",
        release_date="1999-10-15",
        vote_average=8.4,
        budget=63_000_000,
        runtime=139,
        genres=[{"id": 18, "name": "Drama"}],
        production_countries=[{"iso_3166_1": "US", "name": "United States of America"}],
        credits={
            "cast": [{"name": "Edward Norton"}, {"name": "Brad Pitt"}, {"name": "Helena Bonham Carter"}, {"name": "Meat Loaf"}],
            "crew": [{"name": "David Fincher", "job": "Director"}],
        },
    )


def test_movie_facts_from_details():
    facts = movie_facts(_fight_club())

    assert "Fight Club was released in 1999 and has a rating of 8.4/10." in facts
    assert "Fight Club was directed by David Fincher." in facts
    assert "The budget for Fight Club was $63.0 million." in facts
    assert "Fight Club stars Edward Norton, Brad Pitt, Helena Bonham Carter." in facts
    assert "Fight Club has a runtime of 2h 19m." in facts
    assert "Fight Club was filmed in United States of America." in facts
    assert "Fight Club is categorized as Drama." in facts


def test_movie_facts_with_missing_details():
    facts = movie_facts(make_movie(1, title="Mystery Reel", release_date="", budget=0))

    assert "Mystery Reel was directed by an acclaimed director." in facts
    assert "The budget for Mystery Reel was not publicly disclosed." in facts
    assert not any("runtime" in f for f in facts)
    assert any("an unknown year" in f for f in facts)


def test_unknown_mood_uses_cheerful_facts():
    assert mood_facts("Romantic") == MOOD_TRIVIA["romantic"]
    assert mood_facts("hangry") == MOOD_TRIVIA["cheerful"]


@pytest.mark.asyncio
async def test_generate_picks_from_the_right_pool(state):
    catalog = FakeCatalog([_fight_club()])
    service = TriviaService(state, catalog, rng=random.Random(1))

    assert await service.generate(movie_id=550) in movie_facts(_fight_club())
    assert await service.generate(mood="gloomy") in MOOD_TRIVIA["gloomy"]
    assert await service.generate() in GENERAL_TRIVIA


@pytest.mark.asyncio
async def test_generate_falls_back_on_catalog_failure(state):
    service = TriviaService(state, FakeCatalog(fail=True))
    assert await service.generate(movie_id=550) == FALLBACK_FACT


@pytest.mark.asyncio
async def test_liking_twice_is_a_no_op(state):
    service = TriviaService(state, FakeCatalog())
    fact = GENERAL_TRIVIA[0]

    assert await service.like(fact) is True
    state.notifier.drain()
    assert await service.like(fact) is False

    assert state.liked_trivia == [fact]
    assert [n.title for n in state.notifier.drain()] == ["Already Liked"]
    assert state.progress.points == 0


@pytest.mark.asyncio
async def test_movie_trivia_likes_reward_first_three(store, state):
    service = TriviaService(state, FakeCatalog())
    for fact in movie_facts(_fight_club())[:4]:
        await service.like(fact, movie_id=550)

    assert state.progress.points == 3 * 2
    assert state.trivia_points == {550: 3}

    await service.like(movie_facts(_fight_club())[4], movie_id=13)
    assert state.progress.points == 8

    reloaded = await AppState.load(store)
    assert reloaded.trivia_points == {550: 3, 13: 1}
    assert len(reloaded.liked_trivia) == 5


@pytest.mark.asyncio
async def test_blank_fact_is_not_liked(state):
    service = TriviaService(state, FakeCatalog())

    assert await service.like("   ", movie_id=550) is False

    assert state.liked_trivia == []
    assert state.progress.points == 0
    assert state.trivia_points == {}

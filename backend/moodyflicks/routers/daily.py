"""
MoodyFlicks - Daily Challenge Router
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends

from moodyflicks.dependencies import get_catalog, get_state, get_today
from moodyflicks.services.daily_challenge import DailyChallenge, pick_daily_movie, reward_for, next_streak
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import CatalogError, TMDBService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_daily(
    state: AppState = Depends(get_state),
    catalog: TMDBService = Depends(get_catalog),
    today: date = Depends(get_today),
):
    """Today's movie and challenge state. On a catalog failure `movie` is null; retry by calling again."""
    daily = await DailyChallenge(state).refresh(today)

    movie = None
    try:
        picked = await pick_daily_movie(catalog, today)
        movie = {**picked.model_dump(mode="json"), "poster_url": catalog.get_poster_url(picked.poster_path)}
    except CatalogError as e:
        logger.error(f"Daily movie fetch failed: {e}")
        state.notifier.error("Error", "Failed to fetch daily movie. Please try again.")

    upcoming_streak = next_streak(daily.last_completed_date, today, daily.streak)
    return {
        "state": daily,
        "movie": movie,
        "reward": None if daily.completed_today else reward_for(upcoming_streak),
        "notices": state.notifier.drain(),
    }


@router.post("/complete")
async def complete_daily(
    state: AppState = Depends(get_state),
    today: date = Depends(get_today),
):
    points = await DailyChallenge(state).complete(today)
    return {
        "state": state.daily,
        "points_awarded": points,
        "points": state.progress.points,
        "notices": state.notifier.drain(),
    }

"""
MoodyFlicks - Daily Challenge
One featured movie per calendar day. Completing it once a day builds a streak.

States: not-completed-today -> completed-today (explicit user action), reset
back on the first refresh of a later day. The streak is settled when the day
is completed: yesterday -> streak + 1, any other previous date -> 1. A refresh
after a missed day already shows the streak as 1.

The first completion ever counts as day one of a streak, so it pays
DAILY_BASE_POINTS + 1 * DAILY_STREAK_BONUS (55 with the defaults).
"""

import logging
from datetime import date, timedelta
from typing import Optional

from moodyflicks.config import get_settings
from moodyflicks.schemas import Achievement, CatalogMovie, DailyChallengeState
from moodyflicks.services.ledger import ProgressLedger
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import CatalogError, TMDBService

settings = get_settings()
logger = logging.getLogger(__name__)

DAILY_STREAK_TARGET = 3
PAGES_IN_ROTATION = 10
RESULTS_PER_PAGE = 20


def next_streak(last_completed: Optional[date], today: date, current: int) -> int:
    if last_completed == today:
        return current
    if last_completed == today - timedelta(days=1):
        return current + 1
    return 1


def reward_for(streak: int) -> int:
    return settings.DAILY_BASE_POINTS + streak * settings.DAILY_STREAK_BONUS


def daily_slot(today: date) -> tuple[int, int]:
    """(discover page, index in page) for today's movie. Same for every user."""
    day_of_year = today.timetuple().tm_yday
    return day_of_year % PAGES_IN_ROTATION + 1, today.day % RESULTS_PER_PAGE


async def pick_daily_movie(catalog: TMDBService, today: date) -> CatalogMovie:
    page, index = daily_slot(today)
    results = await catalog.discover(page=page, sort_by="popularity.desc")
    if not results:
        raise CatalogError(f"No movies on discover page {page}")
    selected = results[index % len(results)]
    details = await catalog.get_movie(selected.id)
    # Details win; the list entry fills anything details left empty
    merged = {**selected.model_dump(exclude_defaults=True), **details.model_dump(exclude_defaults=True)}
    return CatalogMovie.model_validate(merged)


class DailyChallenge:
    def __init__(self, state: AppState, ledger: Optional[ProgressLedger] = None):
        self.state = state
        self.ledger = ledger or ProgressLedger(state)
        self.notifier = state.notifier

    @property
    def daily(self) -> DailyChallengeState:
        return self.state.daily

    async def refresh(self, today: date) -> DailyChallengeState:
        """On-load reset check: a new calendar day re-opens the challenge."""
        daily = self.daily
        last = daily.last_completed_date
        changed = False
        if daily.completed_today and last != today:
            daily.completed_today = False
            changed = True
            logger.debug("Daily challenge reset for a new day")
        if last is not None and last < today - timedelta(days=1) and daily.streak != 1:
            logger.debug(f"Daily streak of {daily.streak} broken, last completed {last}")
            daily.streak = 1
            changed = True
        if changed:
            await self.state.save_daily()
        return self.daily

    async def complete(self, today: date) -> int:
        """Complete today's challenge. Returns points awarded (0 if already done today)."""
        await self.refresh(today)
        if self.daily.completed_today:
            self.notifier.info("Already Completed", "Come back tomorrow for a new challenge.")
            return 0

        streak = next_streak(self.daily.last_completed_date, today, self.daily.streak)
        self.daily.streak = streak
        self.daily.completed_today = True
        self.daily.last_completed_date = today
        await self.state.save_daily()

        points = reward_for(streak)
        await self.ledger.award_points(points)

        if streak >= DAILY_STREAK_TARGET:
            await self.ledger.unlock_achievement(Achievement.DAILY_STREAK)

        self.notifier.success(
            "Daily Challenge Completed! 🎉",
            f"You've earned {points} points! ({streak} day streak)",
        )
        return points

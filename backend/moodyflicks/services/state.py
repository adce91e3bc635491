"""
MoodyFlicks - Application State
One object owns every piece of user state. It is hydrated from a SlotStore on
load and each mutation writes the affected slot back before returning.
"""

import logging
from datetime import date
from typing import Any, Optional

from moodyflicks.schemas import Collection, DailyChallengeState, QuizStats, UserProgress
from moodyflicks.services import store as slots
from moodyflicks.services.notices import Notifier
from moodyflicks.services.store import SlotStore

logger = logging.getLogger(__name__)


def _unique_ints(values: Any) -> list[int]:
    seen: set[int] = set()
    result = []
    for v in values or []:
        try:
            item = int(v)
        except (TypeError, ValueError):
            continue
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class AppState:
    def __init__(self, store: SlotStore, notifier: Optional[Notifier] = None):
        self.store = store
        self.notifier = notifier or Notifier()
        self.progress = UserProgress()
        self.collections: list[Collection] = []
        self.quiz_stats = QuizStats()
        self.daily = DailyChallengeState()
        self.liked_trivia: list[str] = []
        self.trivia_points: dict[int, int] = {}

    @classmethod
    async def load(cls, store: SlotStore, notifier: Optional[Notifier] = None) -> "AppState":
        state = cls(store, notifier)
        await state.reload()
        return state

    async def reload(self) -> None:
        """Read every slot; missing slots fall back to empty/zero defaults."""
        get = self.store.get
        self.progress = UserProgress(
            points=max(int(await get(slots.POINTS, 0) or 0), 0),
            watched_movie_ids=_unique_ints(await get(slots.WATCHED, [])),
            rated_movie_ids=_unique_ints(await get(slots.RATED, [])),
            saved_movie_ids=_unique_ints(await get(slots.SAVED, [])),
            achievements=list(dict.fromkeys(await get(slots.ACHIEVEMENTS, []) or [])),
        )
        self.collections = [Collection(**c) for c in (await get(slots.COLLECTIONS, []) or [])]
        self.quiz_stats = QuizStats(**(await get(slots.QUIZ_STATS, {}) or {}))
        self.daily = DailyChallengeState(
            completed_today=bool(await get(slots.DAILY_COMPLETED, False)),
            last_completed_date=_parse_date(await get(slots.DAILY_DATE, "")),
            streak=max(int(await get(slots.DAILY_STREAK, 0) or 0), 0),
        )
        self.liked_trivia = list(dict.fromkeys(await get(slots.LIKED_TRIVIA, []) or []))
        raw_trivia_points = await get(slots.TRIVIA_POINTS, {}) or {}
        self.trivia_points = {int(k): int(v) for k, v in raw_trivia_points.items()}

    # ─── Writers ──────────────────────────────────────────

    async def save_points(self) -> None:
        await self.store.set(slots.POINTS, self.progress.points)

    async def save_watched(self) -> None:
        await self.store.set(slots.WATCHED, self.progress.watched_movie_ids)

    async def save_rated(self) -> None:
        await self.store.set(slots.RATED, self.progress.rated_movie_ids)

    async def save_saved(self) -> None:
        await self.store.set(slots.SAVED, self.progress.saved_movie_ids)

    async def save_achievements(self) -> None:
        await self.store.set(slots.ACHIEVEMENTS, [a.value for a in self.progress.achievements])

    async def save_collections(self) -> None:
        await self.store.set(
            slots.COLLECTIONS,
            [c.model_dump(mode="json") for c in self.collections],
        )

    async def save_quiz_stats(self) -> None:
        await self.store.set(slots.QUIZ_STATS, self.quiz_stats.model_dump(mode="json"))

    async def save_daily(self) -> None:
        daily = self.daily
        await self.store.set(slots.DAILY_COMPLETED, daily.completed_today)
        await self.store.set(
            slots.DAILY_DATE,
            daily.last_completed_date.isoformat() if daily.last_completed_date else "",
        )
        await self.store.set(slots.DAILY_STREAK, daily.streak)

    async def save_liked_trivia(self) -> None:
        await self.store.set(slots.LIKED_TRIVIA, self.liked_trivia)

    async def save_trivia_points(self) -> None:
        await self.store.set(slots.TRIVIA_POINTS, {str(k): v for k, v in self.trivia_points.items()})

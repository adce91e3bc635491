"""
MoodyFlicks - Slot Store
Named key/value slots holding JSON-serialisable client state.
MemoryStore backs tests; SqlSlotStore backs the running service.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from moodyflicks.models import StateSlot

logger = logging.getLogger(__name__)

# Slot names match the browser client's localStorage keys
POINTS = "moodyflicks-points"
WATCHED = "moodyflicks-watched"
RATED = "moodyflicks-rated"
SAVED = "moodyflicks-saved"
ACHIEVEMENTS = "moodyflicks-achievements"
COLLECTIONS = "moodyflicks-collections"
QUIZ_STATS = "moodyflicks-quiz-stats"
DAILY_COMPLETED = "moodyflicks-daily-completed"
DAILY_DATE = "moodyflicks-daily-date"
DAILY_STREAK = "moodyflicks-daily-streak"
LIKED_TRIVIA = "moodyflicks-liked-trivia"
TRIVIA_POINTS = "moodyflicks-trivia-points"

ALL_SLOTS = (
    POINTS, WATCHED, RATED, SAVED, ACHIEVEMENTS, COLLECTIONS, QUIZ_STATS,
    DAILY_COMPLETED, DAILY_DATE, DAILY_STREAK, LIKED_TRIVIA, TRIVIA_POINTS,
)


class SlotStore(ABC):
    """Get/set per named slot. Values must survive a JSON round trip."""

    @abstractmethod
    async def get(self, slot: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    async def set(self, slot: str, value: Any) -> None:
        ...


class MemoryStore(SlotStore):
    def __init__(self, initial: dict[str, Any] | None = None):
        self._slots: dict[str, str] = {}
        for slot, value in (initial or {}).items():
            self._slots[slot] = json.dumps(value)

    async def get(self, slot: str, default: Any = None) -> Any:
        raw = self._slots.get(slot)
        if raw is None:
            return copy.deepcopy(default)
        return json.loads(raw)

    async def set(self, slot: str, value: Any) -> None:
        # Serialise on write so callers can't mutate stored state by reference
        self._slots[slot] = json.dumps(value)

    def snapshot(self) -> dict[str, Any]:
        return {slot: json.loads(raw) for slot, raw in self._slots.items()}


class SqlSlotStore(SlotStore):
    """Slots for one profile in the state_slots table. Every set() commits."""

    def __init__(self, session: AsyncSession, profile_id: str = "default"):
        self.session = session
        self.profile_id = profile_id

    async def _row(self, slot: str) -> StateSlot | None:
        result = await self.session.execute(
            select(StateSlot).where(
                StateSlot.profile_id == self.profile_id,
                StateSlot.slot == slot,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, slot: str, default: Any = None) -> Any:
        row = await self._row(slot)
        if row is None or row.value is None:
            return copy.deepcopy(default)
        return copy.deepcopy(row.value)

    async def set(self, slot: str, value: Any) -> None:
        row = await self._row(slot)
        if row is None:
            self.session.add(StateSlot(profile_id=self.profile_id, slot=slot, value=value))
        else:
            row.value = value
            flag_modified(row, "value")
        await self.session.commit()
        logger.debug(f"Saved slot {slot} for profile {self.profile_id}")

"""
MoodyFlicks - Request Dependencies
Each request gets the caller's profile state loaded from the slot store.
"""

import random
from datetime import date

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from moodyflicks.database import get_db
from moodyflicks.services.quiz import QuizRegistry, quiz_registry
from moodyflicks.services.state import AppState
from moodyflicks.services.store import SlotStore, SqlSlotStore
from moodyflicks.services.tmdb import TMDBService, tmdb_service


def get_profile(x_profile: str = Header(default="default", min_length=1, max_length=64)) -> str:
    return x_profile


async def get_store(
    profile: str = Depends(get_profile),
    db: AsyncSession = Depends(get_db),
) -> SlotStore:
    return SqlSlotStore(db, profile_id=profile)


async def get_state(store: SlotStore = Depends(get_store)) -> AppState:
    return await AppState.load(store)


def get_catalog() -> TMDBService:
    return tmdb_service


def get_quiz_registry() -> QuizRegistry:
    return quiz_registry


def get_today() -> date:
    return date.today()


def get_rng() -> random.Random:
    return random.Random()

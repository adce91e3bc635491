"""
MoodyFlicks - Trivia Router
"""

import random
from typing import Optional

from fastapi import APIRouter, Depends, Query

from moodyflicks.dependencies import get_catalog, get_rng, get_state
from moodyflicks.schemas import TriviaLike
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import TMDBService
from moodyflicks.services.trivia import TriviaService

router = APIRouter()


@router.get("")
async def get_trivia(
    mood: Optional[str] = None,
    movie_id: Optional[int] = Query(None, ge=1),
    state: AppState = Depends(get_state),
    catalog: TMDBService = Depends(get_catalog),
    rng: random.Random = Depends(get_rng),
):
    fact = await TriviaService(state, catalog, rng=rng).generate(mood=mood, movie_id=movie_id)
    return {"fact": fact, "liked": fact in state.liked_trivia}


@router.post("/like")
async def like_trivia(
    body: TriviaLike,
    state: AppState = Depends(get_state),
    catalog: TMDBService = Depends(get_catalog),
):
    liked = await TriviaService(state, catalog).like(body.fact, movie_id=body.movie_id)
    return {
        "liked": liked,
        "liked_count": len(state.liked_trivia),
        "points": state.progress.points,
        "notices": state.notifier.drain(),
    }

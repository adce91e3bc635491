"""
MoodyFlicks - Quiz Router
Start a mood quiz, answer questions, and drive the clock with ticks.
The finished session is folded into quiz stats on the request that completes it.
"""

import logging
import random
from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from moodyflicks.dependencies import get_catalog, get_profile, get_quiz_registry, get_rng, get_state, get_today
from moodyflicks.schemas import AnswerRequest, QuizStart, TickRequest
from moodyflicks.services.quiz import (
    QuizGenerationError,
    QuizMode,
    QuizRegistry,
    QuizSession,
    QuizStateError,
    generate_questions,
    record_quiz_result,
)
from moodyflicks.services.recommendations import quiz_batch
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import CatalogError, TMDBService

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_or_404(registry: QuizRegistry, session_id: str, profile: str) -> QuizSession:
    """Sessions are only visible to the profile that started them."""
    session = registry.get(session_id)
    if session is None or session.profile_id != profile:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    return session


async def _settle(session: QuizSession, state: AppState, today: date) -> None:
    if session.completed and not session.recorded:
        await record_quiz_result(state, session, today)


@router.get("/stats")
async def quiz_stats(state: AppState = Depends(get_state)):
    return {"stats": state.quiz_stats}


@router.post("", status_code=201)
async def start_quiz(
    body: QuizStart,
    catalog: TMDBService = Depends(get_catalog),
    registry: QuizRegistry = Depends(get_quiz_registry),
    rng: random.Random = Depends(get_rng),
    profile: str = Depends(get_profile),
):
    try:
        movies = await quiz_batch(catalog, body.mood)
        questions = generate_questions(movies, body.mood, rng=rng)
    except CatalogError as e:
        logger.error(f"Quiz generation failed for {body.mood}: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate quiz questions. Please try again.")
    except QuizGenerationError as e:
        logger.warning(f"Not enough movies for a {body.mood} quiz: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate quiz questions. Please try again.")

    session = registry.add(QuizSession(questions, mood=body.mood, mode=QuizMode(body.mode), profile_id=profile))
    logger.info(f"🧠 Quiz {session.id} started ({body.mood}, {body.mode})")
    return session.view()


@router.get("/{session_id}")
async def get_quiz(
    session_id: str,
    registry: QuizRegistry = Depends(get_quiz_registry),
    profile: str = Depends(get_profile),
):
    return _session_or_404(registry, session_id, profile).view()


@router.post("/{session_id}/answer")
async def answer_question(
    session_id: str,
    body: AnswerRequest,
    registry: QuizRegistry = Depends(get_quiz_registry),
    profile: str = Depends(get_profile),
):
    session = _session_or_404(registry, session_id, profile)
    try:
        awarded = session.answer(body.option)
    except QuizStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {**session.view(), "points_awarded": awarded}


@router.post("/{session_id}/tick")
async def tick_quiz(
    session_id: str,
    body: TickRequest,
    registry: QuizRegistry = Depends(get_quiz_registry),
    state: AppState = Depends(get_state),
    profile: str = Depends(get_profile),
    today: date = Depends(get_today),
):
    session = _session_or_404(registry, session_id, profile)
    session.tick(body.seconds)
    await _settle(session, state, today)
    return {
        **session.view(),
        "stats": state.quiz_stats,
        "points": state.progress.points,
        "notices": state.notifier.drain(),
    }

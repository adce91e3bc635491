"""
MoodyFlicks - Progress Router
Points, watched/rated/saved lists and achievements for the current profile.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path

from moodyflicks.dependencies import get_state
from moodyflicks.schemas import ProgressResponse, RateRequest
from moodyflicks.services.ledger import ProgressLedger
from moodyflicks.services.state import AppState

logger = logging.getLogger(__name__)

router = APIRouter()


def _respond(state: AppState, ledger: ProgressLedger, changed: Optional[bool] = None) -> ProgressResponse:
    return ProgressResponse(
        progress=state.progress,
        summary=ledger.summary(),
        changed=changed,
        notices=state.notifier.drain(),
    )


@router.get("", response_model=ProgressResponse)
async def get_progress(state: AppState = Depends(get_state)):
    return _respond(state, ProgressLedger(state))


@router.post("/watched/{movie_id}", response_model=ProgressResponse)
async def mark_watched(movie_id: int = Path(..., ge=1), state: AppState = Depends(get_state)):
    ledger = ProgressLedger(state)
    changed = await ledger.mark_watched(movie_id)
    return _respond(state, ledger, changed)


@router.post("/rated/{movie_id}", response_model=ProgressResponse)
async def rate_movie(body: RateRequest, movie_id: int = Path(..., ge=1), state: AppState = Depends(get_state)):
    ledger = ProgressLedger(state)
    changed = await ledger.rate_movie(movie_id, body.liked)
    return _respond(state, ledger, changed)


@router.post("/saved/{movie_id}", response_model=ProgressResponse)
async def toggle_saved(movie_id: int = Path(..., ge=1), state: AppState = Depends(get_state)):
    """Toggle; `changed` is True when the movie ends up saved."""
    ledger = ProgressLedger(state)
    now_saved = await ledger.toggle_saved(movie_id)
    return _respond(state, ledger, now_saved)


@router.post("/shared/{movie_id}", response_model=ProgressResponse)
async def record_share(movie_id: int = Path(..., ge=1), state: AppState = Depends(get_state)):
    ledger = ProgressLedger(state)
    changed = await ledger.record_share(movie_id)
    return _respond(state, ledger, changed)

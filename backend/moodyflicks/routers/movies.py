"""
MoodyFlicks - Movies Router
Trending titles and the movie page bundle (details, credits, similar titles).
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from moodyflicks.dependencies import get_catalog, get_state
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import CatalogError, TMDBService

logger = logging.getLogger(__name__)

router = APIRouter()

SIMILAR_LIMIT = 4


@router.get("/trending")
async def trending(
    limit: int = Query(5, ge=1, le=20),
    catalog: TMDBService = Depends(get_catalog),
):
    try:
        movies = await catalog.get_trending("day")
    except CatalogError as e:
        logger.error(f"Trending fetch failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch trending movies")
    return {
        "results": [
            {**m.model_dump(mode="json"), "poster_url": catalog.get_poster_url(m.poster_path)}
            for m in movies[:limit]
        ]
    }


@router.get("/{movie_id}")
async def movie_page(
    movie_id: int,
    state: AppState = Depends(get_state),
    catalog: TMDBService = Depends(get_catalog),
):
    try:
        details, credits, similar = await asyncio.gather(
            catalog.get_movie_raw(movie_id, append=("videos",)),
            catalog.get_credits(movie_id),
            catalog.get_similar(movie_id),
        )
    except CatalogError as e:
        logger.error(f"Movie page fetch failed for {movie_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch movie details. Please try again.")

    progress = state.progress
    return {
        "movie": details,
        "poster_url": catalog.get_poster_url(details.get("poster_path")),
        "backdrop_url": catalog.get_backdrop_url(details.get("backdrop_path")),
        "credits": credits,
        "similar": similar[:SIMILAR_LIMIT],
        "watched": movie_id in progress.watched_movie_ids,
        "rated": movie_id in progress.rated_movie_ids,
        "saved": movie_id in progress.saved_movie_ids,
        "collections": [c.id for c in state.collections if movie_id in c.movie_ids],
    }

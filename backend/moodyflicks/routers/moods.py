"""
MoodyFlicks - Moods Router
Mood list, mood-based discovery, and the mood meter for a movie or the watch history.
"""

import logging
import random

from fastapi import APIRouter, Depends, HTTPException, Query

from moodyflicks.dependencies import get_catalog, get_rng, get_state
from moodyflicks.schemas import CatalogMovie
from moodyflicks.services.mood_meter import score_movie, score_watch_history
from moodyflicks.services.moods import MOOD_MAP, is_known_mood, normalize_mood, profile_for, random_mood
from moodyflicks.services.recommendations import recommend_for_mood
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import CatalogError, TMDBService, fetch_movies

logger = logging.getLogger(__name__)

router = APIRouter()

# Meter over the watch history looks at the most recent titles only
HISTORY_SAMPLE = 20


def _format_result(movie: CatalogMovie, catalog: TMDBService) -> dict:
    return {
        "tmdb_id": movie.id,
        "title": movie.title,
        "release_date": movie.release_date.isoformat() if movie.release_date else "",
        "poster_path": movie.poster_path,
        "poster_url": catalog.get_poster_url(movie.poster_path),
        "overview": movie.overview[:200],
        "vote_average": movie.vote_average,
        "genre_ids": movie.genre_ids,
    }


@router.get("")
async def list_moods():
    return {
        "moods": [
            {"mood": mood, "genres": list(p.genres), "keywords": list(p.keywords)}
            for mood, p in MOOD_MAP.items()
        ]
    }


@router.get("/random")
async def pick_random_mood(rng: random.Random = Depends(get_rng)):
    mood = random_mood(rng)
    return {"mood": mood, "notice": f'We\'ve selected "{mood}" for you. Enjoy!'}


@router.get("/meter")
async def history_mood_meter(
    state: AppState = Depends(get_state),
    catalog: TMDBService = Depends(get_catalog),
):
    watched = state.progress.watched_movie_ids[-HISTORY_SAMPLE:]
    movies, failed = await fetch_movies(catalog, watched, append=("keywords",))
    if failed and not movies:
        logger.error(f"History mood meter failed: none of {len(failed)} watched movies could be fetched")
        raise HTTPException(status_code=502, detail="Failed to fetch watched movies")
    if failed:
        state.notifier.info("Some Movies Skipped", f"{len(failed)} watched movie(s) could not be loaded.")
    return {
        "moods": score_watch_history(movies),
        "sample_size": len(movies),
        "notices": state.notifier.drain(),
    }


@router.get("/meter/{movie_id}")
async def movie_mood_meter(movie_id: int, catalog: TMDBService = Depends(get_catalog)):
    try:
        movie = await catalog.get_movie(movie_id, append=("keywords",))
    except CatalogError as e:
        logger.error(f"Mood meter failed for {movie_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch movie details")
    return {"movie_id": movie.id, "title": movie.title, "moods": score_movie(movie)}


@router.get("/{mood}/recommendations")
async def mood_recommendations(
    mood: str,
    page: int = Query(1, ge=1, le=20),
    catalog: TMDBService = Depends(get_catalog),
):
    try:
        movies = await recommend_for_mood(catalog, mood, page=page)
    except CatalogError as e:
        logger.error(f"Recommendations failed for {mood}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch recommendations")

    profile = profile_for(mood)
    return {
        "mood": normalize_mood(mood),
        "known_mood": is_known_mood(mood),
        "genres": list(profile.genres),
        "keywords": list(profile.keywords),
        "page": page,
        "results": [_format_result(m, catalog) for m in movies],
    }

"""
MoodyFlicks - Mood Recommendations
Popular movies for a mood, discovered by the mood's genres.
"""

import logging

from moodyflicks.schemas import CatalogMovie
from moodyflicks.services.moods import genres_for, is_known_mood
from moodyflicks.services.tmdb import TMDBService

logger = logging.getLogger(__name__)

QUIZ_BATCH_SIZE = 15


async def recommend_for_mood(catalog: TMDBService, mood: str, page: int = 1) -> list[CatalogMovie]:
    if not is_known_mood(mood):
        logger.info(f"Unknown mood '{mood}', using the action/adventure default")
    return await catalog.discover(genres=genres_for(mood), page=page, sort_by="popularity.desc")


async def quiz_batch(catalog: TMDBService, mood: str) -> list[CatalogMovie]:
    """The ordered batch the quiz generator draws its questions from."""
    movies = await recommend_for_mood(catalog, mood)
    return movies[:QUIZ_BATCH_SIZE]

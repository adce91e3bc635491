"""
MoodyFlicks - Mood Meter
Scores how well a movie fits each mood from its genres and keywords.

Fixed heuristic: +20 per matching genre, +10 per keyword containing one of the
mood's keyword substrings. Scores are normalised to percentages and the top
four moods are reported.
"""

import math
from typing import Iterable

from moodyflicks.schemas import CatalogMovie, MoodScore
from moodyflicks.services.moods import MOOD_MAP

GENRE_WEIGHT = 20
KEYWORD_WEIGHT = 10
TOP_MOODS = 4

DEFAULT_DISTRIBUTION = (
    ("cheerful", 25),
    ("adventurous", 25),
    ("romantic", 25),
    ("thrilling", 25),
)


def raw_mood_scores(movie: CatalogMovie) -> dict[str, int]:
    scores = {mood: 0 for mood in MOOD_MAP}

    for genre in movie.genres:
        for mood, profile in MOOD_MAP.items():
            if genre.id in profile.genres:
                scores[mood] += GENRE_WEIGHT

    for keyword in movie.keywords:
        name = keyword.name.lower()
        for mood, profile in MOOD_MAP.items():
            if any(k in name for k in profile.keywords):
                scores[mood] += KEYWORD_WEIGHT

    return scores


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_percentages(scores: dict[str, int], top: int = TOP_MOODS) -> list[MoodScore]:
    total = sum(scores.values()) or 100
    ranked = [
        MoodScore(mood=mood, percentage=_round_half_up(score / total * 100))
        for mood, score in scores.items()
    ]
    # sorted() is stable so equal percentages keep mood order
    ranked = sorted(ranked, key=lambda m: m.percentage, reverse=True)
    return ranked[:top]


def score_movie(movie: CatalogMovie) -> list[MoodScore]:
    return to_percentages(raw_mood_scores(movie))


def score_watch_history(movies: Iterable[CatalogMovie]) -> list[MoodScore]:
    """Aggregate mood profile over several movies (e.g. everything watched)."""
    movies = list(movies)
    if not movies:
        return [MoodScore(mood=m, percentage=p) for m, p in DEFAULT_DISTRIBUTION]

    totals = {mood: 0 for mood in MOOD_MAP}
    for movie in movies:
        for mood, score in raw_mood_scores(movie).items():
            totals[mood] += score
    return to_percentages(totals)

"""
MoodyFlicks - Mood Mapping
Static table from mood label to TMDB genre IDs and keyword substrings.
Shared by recommendations, the mood meter and the quiz generator.
"""

import random
from typing import NamedTuple, Optional


class MoodProfile(NamedTuple):
    genres: tuple[int, ...]
    keywords: tuple[str, ...]


# TMDB movie genre IDs
ACTION = 28
ADVENTURE = 12
ANIMATION = 16
COMEDY = 35
CRIME = 80
DOCUMENTARY = 99
DRAMA = 18
FAMILY = 10751
HISTORY = 36
HORROR = 27
MYSTERY = 9648
ROMANCE = 10749
SCIENCE_FICTION = 878
THRILLER = 53
TV_MOVIE = 10770
WAR = 10752

# Dict order is the mood enumeration order; ties in the mood meter keep it
MOOD_MAP: dict[str, MoodProfile] = {
    "cheerful": MoodProfile(
        (COMEDY, FAMILY, ANIMATION),
        ("funny", "happy", "comedy", "feel-good", "heartwarming"),
    ),
    "reflective": MoodProfile(
        (DRAMA, HISTORY),
        ("thought-provoking", "philosophical", "meaningful", "deep"),
    ),
    "gloomy": MoodProfile(
        (DRAMA, MYSTERY, WAR),
        ("sad", "melancholy", "depressing", "tragic", "dark"),
    ),
    "humorous": MoodProfile(
        (COMEDY,),
        ("comedy", "funny", "humor", "laugh", "parody"),
    ),
    "adventurous": MoodProfile(
        (ADVENTURE, ACTION, SCIENCE_FICTION),
        ("adventure", "action", "journey", "quest", "exploration"),
    ),
    "romantic": MoodProfile(
        (ROMANCE,),
        ("romance", "love", "relationship", "romantic", "passion"),
    ),
    "thrilling": MoodProfile(
        (THRILLER, HORROR, CRIME),
        ("suspense", "thriller", "tension", "mystery", "twist"),
    ),
    "relaxed": MoodProfile(
        (HISTORY, DOCUMENTARY, TV_MOVIE),
        ("calm", "peaceful", "soothing", "gentle", "relaxing"),
    ),
}

MOODS = tuple(MOOD_MAP)

DEFAULT_PROFILE = MoodProfile((ACTION, ADVENTURE), ("action", "adventure"))

# Flavour text for quiz explanations
MOOD_FLAVOR = {
    "cheerful": "uplifting tone",
    "thrilling": "suspenseful elements",
    "romantic": "love story",
}


def normalize_mood(mood: Optional[str]) -> str:
    return (mood or "").strip().lower()


def is_known_mood(mood: Optional[str]) -> bool:
    return normalize_mood(mood) in MOOD_MAP


def profile_for(mood: Optional[str]) -> MoodProfile:
    """Total lookup: unknown moods get the action/adventure default."""
    return MOOD_MAP.get(normalize_mood(mood), DEFAULT_PROFILE)


def genres_for(mood: Optional[str]) -> tuple[int, ...]:
    return profile_for(mood).genres


def keywords_for(mood: Optional[str]) -> tuple[str, ...]:
    return profile_for(mood).keywords


def random_mood(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(MOODS)

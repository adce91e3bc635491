"""
MoodyFlicks - Movie Trivia
Facts built from a movie's details, canned facts per mood, and general cinema
facts. Liked facts are kept so the same fact can't be liked twice.
"""

import logging
import random
from typing import Optional

from moodyflicks.schemas import CatalogMovie
from moodyflicks.services.ledger import ProgressLedger
from moodyflicks.services.moods import normalize_mood
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import CatalogError, TMDBService

logger = logging.getLogger(__name__)

TRIVIA_LIKE_POINTS = 2
MAX_REWARDED_LIKES_PER_MOVIE = 3
FALLBACK_FACT = "Did you know? The art of filmmaking dates back to the late 19th century!"

MOOD_TRIVIA: dict[str, list[str]] = {
    "cheerful": [
        "Studies show that watching comedy movies can boost your immune system by increasing antibody production.",
        "The first feature-length comedy film was 'Tillie's Punctured Romance' (1914) starring Charlie Chaplin.",
        "Laughter during funny movies can burn up to 40 calories per 10 minutes!",
        "The longest running comedy film series is 'Carry On' with 31 films between 1958 and 1992.",
        "The term 'feel-good movie' originated in the 1980s to describe films that leave audiences feeling positive.",
    ],
    "reflective": [
        "The term 'arthouse film' originated in the 1950s to describe movies with artistic or experimental styles.",
        "Philosophical films often use visual metaphors to represent complex ideas about existence.",
        "Many reflective films use the technique of 'slow cinema' with long takes and minimal dialogue.",
        "Studies show that watching thought-provoking films can increase empathy and emotional intelligence.",
        "The 'Golden Age of Philosophical Cinema' is often considered to be the 1960s European art films.",
    ],
    "gloomy": [
        "The term 'film noir' (dark film) was coined by French critics to describe Hollywood crime dramas of the 1940s.",
        "Melancholic films often use desaturated colors and rain to enhance the somber mood.",
        "Studies show that sad movies can actually improve mood by triggering empathy hormones.",
        "The 'pathetic fallacy' is a literary device where weather reflects emotions, commonly used in gloomy films.",
        "Many directors use the 'blue filter' technique to create a cold, detached feeling in melancholic scenes.",
    ],
    "humorous": [
        "The first comedy film was 'L'Arroseur Arrosé' (1895), showing a gardener being sprayed with his own hose.",
        "Comedies are one of the oldest film genres, dating back to the silent film era.",
        "The term 'slapstick' comes from a prop made of two wooden slats that made a 'slap' sound when hit together.",
        "Studies show that comedy films can reduce stress hormones and increase endorphins.",
        "The longest laugh recorded in a test screening was 3 minutes and 16 seconds during 'There's Something About Mary'.",
    ],
    "adventurous": [
        "The adventure film genre dates back to the silent era with films like 'The Thief of Bagdad' (1924).",
        "Many adventure films are shot in IMAX to capture the grandeur of exotic locations.",
        "The Wilhelm Scream is a famous sound effect used in over 400 adventure and action films.",
        "Adventure films often follow the 'Hero's Journey' narrative structure identified by Joseph Campbell.",
        "The most expensive adventure film ever made was 'Pirates of the Caribbean: On Stranger Tides' at $379 million.",
    ],
    "romantic": [
        "The term 'meet-cute' describes the scenario where future romantic partners meet for the first time.",
        "The first on-screen kiss was in the 1896 film 'The Kiss', which caused moral outrage at the time.",
        "Studies show that watching romantic movies can increase oxytocin, the 'love hormone'.",
        "The 'golden hour' (just after sunrise or before sunset) is often used to film romantic scenes for its warm glow.",
        "The longest on-screen kiss was 3 minutes and 24 seconds in the film 'You're Next' (2013).",
    ],
    "thrilling": [
        "Alfred Hitchcock, the 'Master of Suspense', never won an Oscar for directing despite making over 50 films.",
        "The term 'MacGuffin' refers to a plot device that motivates characters but is ultimately unimportant.",
        "Suspenseful music often uses the 'Shepard tone' illusion to create a feeling of ever-increasing tension.",
        "Studies show that watching thrillers can burn calories due to increased heart rate and adrenaline.",
        "The shower scene in 'Psycho' contains 78 camera setups and 52 cuts, but the knife never actually touches the victim.",
    ],
    "relaxed": [
        "The 'slow cinema' movement features long takes, minimal dialogue, and contemplative pacing.",
        "Nature documentaries are often filmed at higher frame rates and slowed down to create a calming effect.",
        "Studies show that watching peaceful scenes in films can lower blood pressure and heart rate.",
        "The 'golden ratio' (approximately 1.618:1) is often used in composing visually pleasing, calming shots.",
        "ASMR (Autonomous Sensory Meridian Response) videos became popular for their relaxing, tingling sensations.",
    ],
}

GENERAL_TRIVIA = [
    "The first film ever made was 'Roundhay Garden Scene' (1888), which is only 2.11 seconds long.",
    "The Wilhelm Scream is a famous sound effect used in over 400 films since 1951.",
    "The longest film ever made is 'Logistics' (2012) with a runtime of 857 hours (35 days and 17 hours).",
    "The highest-grossing film of all time adjusted for inflation is 'Gone with the Wind' (1939).",
    "The first feature-length animated film was Disney's 'Snow White and the Seven Dwarfs' (1937).",
    "The shortest performance to win an Oscar was Beatrice Straight in 'Network' (1976) with 5 minutes 40 seconds of screen time.",
    "The most expensive film ever made was 'Pirates of the Caribbean: On Stranger Tides' (2011) with a budget of $379 million.",
    "The first film to use CGI was 'Westworld' (1973), which used it to show the robot's point of view.",
    "The highest-grossing R-rated film is 'Joker' (2019), which made over $1 billion worldwide.",
    "The first 3D film was 'The Power of Love' (1922), which used the anaglyph color system with red/green glasses.",
]


def movie_facts(movie: CatalogMovie) -> list[str]:
    """Every fact we can state about one movie (details fetched with credits)."""
    title = movie.title
    year = movie.release_year if movie.release_year is not None else "an unknown year"
    director = movie.credits.director or "an acclaimed director"
    budget = (
        f"${movie.budget / 1_000_000:.1f} million" if movie.budget > 0 else "not publicly disclosed"
    )
    cast = ", ".join(c.name for c in movie.credits.cast[:3]) or "talented actors"
    countries = ", ".join(c.name for c in movie.production_countries) or "various locations"
    genres = ", ".join(g.name for g in movie.genres if g.name) or "a genre-defying film"

    facts = [
        f"{title} was released in {year} and has a rating of {movie.vote_average:.1f}/10.",
        f"{title} was directed by {director}.",
        f"The budget for {title} was {budget}.",
        f"{title} stars {cast}.",
    ]
    if movie.runtime:
        facts.append(f"{title} has a runtime of {movie.runtime // 60}h {movie.runtime % 60}m.")
    facts.append(f"{title} was filmed in {countries}.")
    facts.append(f"{title} is categorized as {genres}.")
    return facts


def mood_facts(mood: Optional[str]) -> list[str]:
    return MOOD_TRIVIA.get(normalize_mood(mood), MOOD_TRIVIA["cheerful"])


class TriviaService:
    def __init__(self, state: AppState, catalog: TMDBService, ledger: Optional[ProgressLedger] = None,
                 rng: Optional[random.Random] = None):
        self.state = state
        self.catalog = catalog
        self.ledger = ledger or ProgressLedger(state)
        self.notifier = state.notifier
        self.rng = rng or random.Random()

    async def generate(self, mood: Optional[str] = None, movie_id: Optional[int] = None) -> str:
        """Movie fact if a movie is given, else a mood fact, else general trivia."""
        if movie_id:
            try:
                movie = await self.catalog.get_movie(movie_id, append=("credits", "keywords"))
            except CatalogError as e:
                logger.error(f"Trivia lookup failed for movie {movie_id}: {e}")
                return FALLBACK_FACT
            return self.rng.choice(movie_facts(movie))
        if mood:
            return self.rng.choice(mood_facts(mood))
        return self.rng.choice(GENERAL_TRIVIA)

    async def like(self, fact: str, movie_id: Optional[int] = None) -> bool:
        fact = fact.strip()
        if not fact:
            self.notifier.info("Nothing to Like", "That trivia fact is empty.")
            return False
        if fact in self.state.liked_trivia:
            self.notifier.info("Already Liked", "You've already liked this trivia fact.")
            return False

        self.state.liked_trivia.append(fact)
        await self.state.save_liked_trivia()
        self.notifier.success("Trivia Liked!", "This fact has been saved to your collection.")

        if movie_id is not None:
            rewarded = self.state.trivia_points.get(movie_id, 0)
            if rewarded < MAX_REWARDED_LIKES_PER_MOVIE:
                self.state.trivia_points[movie_id] = rewarded + 1
                await self.state.save_trivia_points()
                await self.ledger.award_points(TRIVIA_LIKE_POINTS)
                self.notifier.success(
                    "Trivia Liked!",
                    f"You earned {TRIVIA_LIKE_POINTS} points for engaging with movie trivia.",
                )
        return True

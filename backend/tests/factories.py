"""
Test factories: catalog records, a fake catalog client and a stepping clock.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from moodyflicks.schemas import CatalogMovie, Credits
from moodyflicks.services.tmdb import CatalogError


def make_movie(movie_id: int, title: Optional[str] = None, **fields) -> CatalogMovie:
    payload = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "overview": f"Overview of movie {movie_id}, a story worth telling on a rainy night.",
        "poster_path": f"/poster{movie_id}.jpg",
        "release_date": "2010-06-15",
        "vote_average": 6.5,
    }
    payload.update(fields)
    return CatalogMovie.model_validate(payload)


def quiz_movies(count: int = 15) -> list[CatalogMovie]:
    """A discover-style batch with distinct ratings and years."""
    return [
        make_movie(
            i,
            title=f"Film {i}",
            release_date=f"{2005 + i}-03-0{(i % 9) + 1}",
            vote_average=5.0 + (i % 7) * 0.5,
        )
        for i in range(1, count + 1)
    ]


class FakeCatalog:
    """Stands in for TMDBService; records discover calls."""

    image_base = "https://image.tmdb.org/t/p"

    def __init__(self, movies: Optional[list[CatalogMovie]] = None, fail: bool = False):
        self.movies = {m.id: m for m in (movies or [])}
        self.listing = list(movies or [])
        self.fail = fail
        self.discover_calls: list[dict] = []

    def _check(self):
        if self.fail:
            raise CatalogError("catalog unavailable", status_code=503)

    async def get_movie(self, movie_id: int, append=()) -> CatalogMovie:
        self._check()
        if movie_id not in self.movies:
            raise CatalogError(f"movie {movie_id} not found", status_code=404)
        return self.movies[movie_id]

    async def get_movie_raw(self, movie_id: int, append=()) -> dict:
        movie = await self.get_movie(movie_id, append)
        return movie.model_dump(mode="json")

    async def get_credits(self, movie_id: int) -> Credits:
        return (await self.get_movie(movie_id)).credits

    async def get_similar(self, movie_id: int, page: int = 1) -> list[CatalogMovie]:
        self._check()
        return [m for m in self.listing if m.id != movie_id]

    async def get_trending(self, time_window: str = "day", page: int = 1) -> list[CatalogMovie]:
        self._check()
        return list(self.listing)

    async def discover(self, genres=(), page=1, sort_by="popularity.desc", match_any=True) -> list[CatalogMovie]:
        self.discover_calls.append({"genres": list(genres), "page": page, "sort_by": sort_by})
        self._check()
        return list(self.listing)

    def get_poster_url(self, path, size="w500"):
        return f"{self.image_base}/{size}{path}" if path else None

    def get_backdrop_url(self, path, size="w1280"):
        return f"{self.image_base}/{size}{path}" if path else None


class SteppingClock:
    """Returns a later time on every call."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


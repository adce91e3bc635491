"""
MoodyFlicks - TMDB Catalog Client
Movie details, credits, keywords, similar, trending and genre discovery.
Failures are logged and raised as CatalogError; nothing is retried automatically.
"""

import asyncio
import httpx
import logging
from typing import Iterable, Optional
from moodyflicks.config import get_settings
from moodyflicks.schemas import CatalogMovie, Credits, Keyword

settings = get_settings()
logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Catalog request failed (transport error, timeout or non-2xx response)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TMDBService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.TMDB_API_KEY if api_key is None else api_key
        self.base = (base_url or settings.TMDB_BASE_URL).rstrip("/")
        self.image_base = settings.TMDB_IMAGE_BASE
        self.timeout = settings.TMDB_TIMEOUT
        self._transport = transport

    async def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a TMDB API request. Raises CatalogError on any failure."""
        query = {"api_key": self.api_key, **(params or {})}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(f"{self.base}{endpoint}", params=query)
        except httpx.TimeoutException as e:
            logger.warning(f"TMDB timeout: {endpoint}")
            raise CatalogError(f"Timed out fetching {endpoint}") from e
        except httpx.HTTPError as e:
            logger.error(f"TMDB request failed: {endpoint}: {e}")
            raise CatalogError(f"Failed to fetch {endpoint}") from e

        if resp.status_code == 401:
            logger.critical("⚠️ TMDB API key is invalid!")
        elif resp.status_code == 404:
            logger.debug(f"TMDB 404: {endpoint}")
        elif resp.status_code == 429:
            logger.warning(f"TMDB rate limited: {endpoint}")
        elif resp.status_code >= 400:
            logger.error(f"TMDB error {resp.status_code}: {endpoint}")

        if not resp.is_success:
            raise CatalogError(
                f"TMDB returned {resp.status_code} for {endpoint}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"TMDB returned invalid JSON: {endpoint}")
            raise CatalogError(f"Invalid JSON from {endpoint}") from e

    def _parse_results(self, items: list[dict]) -> list[CatalogMovie]:
        """Drop adult titles and items without a title, parse the rest."""
        movies = []
        for item in items:
            if item.get("adult", False):
                continue
            if not (item.get("title") or item.get("name")):
                continue
            movies.append(CatalogMovie.model_validate(item))
        return movies

    async def get_movie(self, movie_id: int, append: Iterable[str] = ()) -> CatalogMovie:
        """Full movie details, optionally with appended keywords/credits/videos."""
        params = {}
        append = list(append)
        if append:
            params["append_to_response"] = ",".join(append)
        data = await self._get(f"/movie/{movie_id}", params)
        return CatalogMovie.model_validate(data)

    async def get_movie_raw(self, movie_id: int, append: Iterable[str] = ()) -> dict:
        """Untyped details for the movie page (videos, companies...)."""
        params = {}
        append = list(append)
        if append:
            params["append_to_response"] = ",".join(append)
        return await self._get(f"/movie/{movie_id}", params)

    async def get_credits(self, movie_id: int) -> Credits:
        data = await self._get(f"/movie/{movie_id}/credits")
        return Credits.model_validate(data)

    async def get_keywords(self, movie_id: int) -> list[Keyword]:
        data = await self._get(f"/movie/{movie_id}/keywords")
        return [Keyword.model_validate(k) for k in data.get("keywords", [])]

    async def get_similar(self, movie_id: int, page: int = 1) -> list[CatalogMovie]:
        data = await self._get(f"/movie/{movie_id}/similar", {"page": page})
        return self._parse_results(data.get("results", []))

    async def get_trending(self, time_window: str = "day", page: int = 1) -> list[CatalogMovie]:
        data = await self._get(f"/trending/movie/{time_window}", {"page": page})
        return self._parse_results(data.get("results", []))

    async def discover(
        self,
        genres: Iterable[int] = (),
        page: int = 1,
        sort_by: str = "popularity.desc",
        match_any: bool = True,
    ) -> list[CatalogMovie]:
        """Genre-filtered discovery. match_any joins genres with '|' (OR), else ',' (AND)."""
        params = {
            "sort_by": sort_by,
            "page": page,
            "include_adult": "false",
        }
        genres = [str(g) for g in genres]
        if genres:
            params["with_genres"] = ("|" if match_any else ",").join(genres)
        data = await self._get("/discover/movie", params)
        return self._parse_results(data.get("results", []))

    def get_poster_url(self, path: Optional[str], size: str = "w500") -> Optional[str]:
        if not path:
            return None
        return f"{self.image_base}/{size}{path}"

    def get_backdrop_url(self, path: Optional[str], size: str = "w1280") -> Optional[str]:
        if not path:
            return None
        return f"{self.image_base}/{size}{path}"


async def fetch_movies(
    catalog: TMDBService,
    movie_ids: Iterable[int],
    append: Iterable[str] = (),
) -> tuple[list[CatalogMovie], list[int]]:
    """Fetch several movies concurrently. Returns (movies, ids that failed).

    A CatalogError for one id (e.g. a title TMDB has delisted) only drops that
    id. Any other exception propagates.
    """
    movie_ids = list(movie_ids)
    append = tuple(append)
    results = await asyncio.gather(
        *(catalog.get_movie(mid, append=append) for mid in movie_ids),
        return_exceptions=True,
    )
    movies, failed = [], []
    for mid, result in zip(movie_ids, results):
        if isinstance(result, CatalogError):
            logger.warning(f"Skipping movie {mid}: {result}")
            failed.append(mid)
        elif isinstance(result, BaseException):
            raise result
        else:
            movies.append(result)
    return movies, failed


tmdb_service = TMDBService()

"""
MoodyFlicks - Collection Manager
CRUD over user-created, named groupings of movie IDs.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from rapidfuzz import fuzz, process, utils

from moodyflicks.schemas import Achievement, Collection
from moodyflicks.services.ledger import ProgressLedger
from moodyflicks.services.state import AppState

logger = logging.getLogger(__name__)

CURATOR_POINTS = 10


class CollectionError(Exception):
    pass


class CollectionValidationError(CollectionError):
    """Rejected before any state change (blank name...)."""


class CollectionNotFound(CollectionError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CollectionManager:
    def __init__(
        self,
        state: AppState,
        ledger: Optional[ProgressLedger] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.state = state
        self.ledger = ledger or ProgressLedger(state)
        self.notifier = state.notifier
        self.clock = clock

    @property
    def collections(self) -> list[Collection]:
        return self.state.collections

    def get(self, collection_id: str) -> Collection:
        for collection in self.collections:
            if collection.id == collection_id:
                return collection
        raise CollectionNotFound(f"Collection {collection_id} not found")

    def _new_id(self, now: datetime) -> str:
        taken = {c.id for c in self.collections}
        stamp = int(now.timestamp() * 1000)
        while f"col_{stamp}" in taken:
            stamp += 1
        return f"col_{stamp}"

    def _validated_name(self, name: Optional[str]) -> str:
        if not name or not name.strip():
            self.notifier.error("Error", "Collection name cannot be empty.")
            raise CollectionValidationError("Collection name cannot be empty")
        return name.strip()

    def _touch(self, collection: Collection) -> None:
        collection.updated_at = max(self.clock(), collection.created_at)

    async def create(self, name: str, description: str = "") -> Collection:
        name = self._validated_name(name)
        now = self.clock()
        collection = Collection(
            id=self._new_id(now),
            name=name,
            description=(description or "").strip(),
            movie_ids=[],
            created_at=now,
            updated_at=now,
        )
        self.collections.append(collection)
        await self.state.save_collections()
        logger.info(f"📁 Created collection {collection.id} ({name})")
        self.notifier.success("Collection Created", f'"{name}" has been created.')
        return collection

    async def update(
        self,
        collection_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Collection:
        collection = self.get(collection_id)
        new_name = self._validated_name(collection.name if name is None else name)

        collection.name = new_name
        if description is not None:
            collection.description = description.strip()
        self._touch(collection)
        await self.state.save_collections()
        self.notifier.success("Collection Updated", f'"{new_name}" has been updated.')
        return collection

    async def delete(self, collection_id: str) -> Collection:
        collection = self.get(collection_id)
        self.state.collections = [c for c in self.collections if c.id != collection_id]
        await self.state.save_collections()
        logger.info(f"🗑️ Deleted collection {collection_id}")
        self.notifier.success("Collection Deleted", f'"{collection.name}" has been deleted.')
        return collection

    async def add_movie(self, collection_id: str, movie_id: int) -> bool:
        collection = self.get(collection_id)
        if movie_id in collection.movie_ids:
            self.notifier.info("Already Added", f'This movie is already in "{collection.name}".')
            return False

        first_ever = not any(c.movie_ids for c in self.collections)
        collection.movie_ids.append(movie_id)
        self._touch(collection)
        await self.state.save_collections()
        self.notifier.success("Added to Collection", f'Added to "{collection.name}".')

        if first_ever and not self.state.progress.has(Achievement.CURATOR):
            await self.ledger.award_points(CURATOR_POINTS)
            await self.ledger.unlock_achievement(Achievement.CURATOR)
        return True

    async def remove_movie(self, collection_id: str, movie_id: int) -> bool:
        collection = self.get(collection_id)
        if movie_id not in collection.movie_ids:
            return False
        collection.movie_ids.remove(movie_id)
        self._touch(collection)
        await self.state.save_collections()
        self.notifier.info("Movie Removed", "Movie has been removed from the collection.")
        return True

    def search(self, query: str, limit: int = 5, score_cutoff: float = 60) -> list[Collection]:
        """Fuzzy match collection names, best first."""
        query = (query or "").strip()
        if not query or not self.collections:
            return []
        choices = {c.id: c.name for c in self.collections}
        matches = process.extract(
            query,
            choices,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            limit=limit,
            score_cutoff=score_cutoff,
        )
        return [self.get(key) for _, _, key in matches]

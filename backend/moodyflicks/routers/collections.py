"""
MoodyFlicks - Collections Router
Create, edit and export named movie collections.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from moodyflicks.dependencies import get_catalog, get_state, get_today
from moodyflicks.schemas import CollectionCreate, CollectionUpdate
from moodyflicks.services.collections import (
    CollectionManager,
    CollectionNotFound,
    CollectionValidationError,
)
from moodyflicks.services.export import build_export, render_text
from moodyflicks.services.state import AppState
from moodyflicks.services.tmdb import TMDBService, fetch_movies

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, detail: str, state: AppState) -> JSONResponse:
    notices = [n.model_dump(mode="json") for n in state.notifier.drain()]
    return JSONResponse(status_code=status_code, content={"detail": detail, "notices": notices})


def _not_found(collection_id: str, state: AppState) -> JSONResponse:
    return _error(404, f"Collection {collection_id} not found", state)


@router.get("")
async def list_collections(state: AppState = Depends(get_state)):
    return {"collections": state.collections}


@router.post("", status_code=201)
async def create_collection(body: CollectionCreate, state: AppState = Depends(get_state)):
    manager = CollectionManager(state)
    try:
        collection = await manager.create(body.name, body.description)
    except CollectionValidationError as e:
        return _error(422, str(e), state)
    return {"collection": collection, "notices": state.notifier.drain()}


@router.get("/search")
async def search_collections(
    q: str = Query(..., min_length=1),
    limit: int = Query(5, ge=1, le=50),
    state: AppState = Depends(get_state),
):
    return {"collections": CollectionManager(state).search(q, limit=limit)}


@router.get("/{collection_id}")
async def get_collection(collection_id: str, state: AppState = Depends(get_state)):
    try:
        return {"collection": CollectionManager(state).get(collection_id)}
    except CollectionNotFound:
        return _not_found(collection_id, state)


@router.patch("/{collection_id}")
async def update_collection(collection_id: str, body: CollectionUpdate, state: AppState = Depends(get_state)):
    manager = CollectionManager(state)
    try:
        collection = await manager.update(collection_id, name=body.name, description=body.description)
    except CollectionNotFound:
        return _not_found(collection_id, state)
    except CollectionValidationError as e:
        return _error(422, str(e), state)
    return {"collection": collection, "notices": state.notifier.drain()}


@router.delete("/{collection_id}")
async def delete_collection(collection_id: str, state: AppState = Depends(get_state)):
    try:
        deleted = await CollectionManager(state).delete(collection_id)
    except CollectionNotFound:
        return _not_found(collection_id, state)
    return {"deleted": deleted.id, "notices": state.notifier.drain()}


@router.post("/{collection_id}/movies/{movie_id}")
async def add_movie(collection_id: str, movie_id: int, state: AppState = Depends(get_state)):
    manager = CollectionManager(state)
    try:
        added = await manager.add_movie(collection_id, movie_id)
    except CollectionNotFound:
        return _not_found(collection_id, state)
    return {
        "added": added,
        "collection": manager.get(collection_id),
        "points": state.progress.points,
        "notices": state.notifier.drain(),
    }


@router.delete("/{collection_id}/movies/{movie_id}")
async def remove_movie(collection_id: str, movie_id: int, state: AppState = Depends(get_state)):
    manager = CollectionManager(state)
    try:
        removed = await manager.remove_movie(collection_id, movie_id)
    except CollectionNotFound:
        return _not_found(collection_id, state)
    return {
        "removed": removed,
        "collection": manager.get(collection_id),
        "notices": state.notifier.drain(),
    }


@router.get("/{collection_id}/export")
async def export_collection(
    collection_id: str,
    sort_by: str = Query("title", pattern="^(title|rating|date)$"),
    include_stats: bool = True,
    format: str = Query("json", pattern="^(json|text)$"),
    state: AppState = Depends(get_state),
    catalog: TMDBService = Depends(get_catalog),
    today: date = Depends(get_today),
):
    """Printable summary of a collection. `format=text` returns the rendered document."""
    try:
        collection = CollectionManager(state).get(collection_id)
    except CollectionNotFound:
        return _not_found(collection_id, state)

    movies, failed = await fetch_movies(catalog, collection.movie_ids)
    if failed and not movies:
        logger.error(f"Export of {collection_id} failed: no movie could be fetched")
        state.notifier.error("Error", "Failed to fetch collection movies.")
        return _error(502, "Failed to fetch collection movies", state)
    if failed:
        state.notifier.info(
            "Some Movies Skipped",
            f"{len(failed)} movie(s) could not be loaded and were left out of the export.",
        )

    export = build_export(
        collection,
        movies,
        sort_by=sort_by,
        include_stats=include_stats,
        today=today,
        poster_url=catalog.get_poster_url,
    )
    if format == "text":
        return PlainTextResponse(render_text(export))
    return {**export.model_dump(mode="json"), "notices": state.notifier.drain()}

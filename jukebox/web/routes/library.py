"""
REST routes for the song catalog.

- GET /library: every song, catalog order
- GET /library/{song_id}: one song, 404 if the id is not in the catalog
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, FastAPI, HTTPException

from jukebox.core import NotFoundError
from jukebox.web.serializers import song_to_dict

if TYPE_CHECKING:
    from jukebox.core.library import LibraryService

logger = logging.getLogger(__name__)


def register_library_routes(app: FastAPI, library: LibraryService) -> None:
    """
    Register catalog routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        library: LibraryService answering the requests
    """
    router = APIRouter(tags=["library"])

    @router.get("/library")
    async def get_catalog() -> list[dict[str, Any]]:
        """List the whole catalog."""
        return [song_to_dict(song) for song in library.get_catalog()]

    @router.get("/library/{song_id}")
    async def get_song(song_id: int) -> dict[str, Any]:
        """Get a single song by ID."""
        try:
            song = library.get_song(song_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return song_to_dict(song)

    app.include_router(router)

"""
REST routes for playlists.

- GET    /playlist:       all playlists
- POST   /playlist:       create, body {"name": ..., "songs": [...]} -> {"id": n}
- GET    /playlist/{id}:  one playlist, 404 if absent
- POST   /playlist/{id}:  full overwrite (or create at that id) -> {"id": id}
- DELETE /playlist/{id}:  always 200 {}
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, FastAPI, HTTPException, Path, Request

from jukebox.core import InvalidNameError, NotFoundError
from jukebox.web.serializers import playlist_to_dict

if TYPE_CHECKING:
    from jukebox.core.library import LibraryService

logger = logging.getLogger(__name__)

# SQLite INTEGER range; ids outside it can never be stored.
MIN_PLAYLIST_ID = -(2**63)
MAX_PLAYLIST_ID = 2**63 - 1

StorablePlaylistId = Annotated[int, Path(ge=MIN_PLAYLIST_ID, le=MAX_PLAYLIST_ID)]


async def _read_playlist_body(request: Request) -> tuple[Any, list[int]]:
    """
    Parse and check a playlist request body.

    Returns:
        (name, songs). The name is passed on as-is; the service rejects
        empty names.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail="Request body must be JSON") from e

    logger.debug("Playlist request %s %s: %r", request.method, request.url.path, body)

    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    songs = body.get("songs")
    if songs is None:
        songs = []
    if not isinstance(songs, list) or not all(
        isinstance(s, int) and not isinstance(s, bool) for s in songs
    ):
        raise HTTPException(status_code=400, detail="'songs' must be a list of song ids")

    return body.get("name"), songs


def register_playlist_routes(app: FastAPI, library: LibraryService) -> None:
    """
    Register playlist routes with the FastAPI app.

    Args:
        app: FastAPI application instance
        library: LibraryService answering the requests
    """
    router = APIRouter(tags=["playlist"])

    async def _save(playlist_id: int | None, request: Request) -> dict[str, Any]:
        name, songs = await _read_playlist_body(request)
        try:
            new_id = await library.create_or_update_playlist(playlist_id, name, songs)
        except InvalidNameError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"id": new_id}

    @router.get("/playlist")
    async def list_playlists() -> list[dict[str, Any]]:
        """List all playlists."""
        playlists = await library.get_playlists()
        return [playlist_to_dict(p) for p in playlists]

    @router.post("/playlist")
    async def create_playlist(request: Request) -> dict[str, Any]:
        """Create a playlist with a newly allocated id."""
        return await _save(None, request)

    @router.get("/playlist/{playlist_id}")
    async def get_playlist(playlist_id: int) -> dict[str, Any]:
        """Get a single playlist by ID."""
        try:
            playlist = library.get_playlist(playlist_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return playlist_to_dict(playlist)

    @router.post("/playlist/{playlist_id}")
    async def save_playlist(playlist_id: StorablePlaylistId, request: Request) -> dict[str, Any]:
        """Replace name and songs of a playlist (creating it if needed)."""
        return await _save(playlist_id, request)

    @router.delete("/playlist/{playlist_id}")
    async def delete_playlist(playlist_id: int) -> dict[str, Any]:
        """Delete a playlist. Always succeeds, even for unknown ids."""
        await library.delete_playlist(playlist_id)
        return {}

    app.include_router(router)

from __future__ import annotations

import logging
from typing import Any, Iterable

from jukebox.core import StoreUnavailableError
from jukebox.core.db.models import Playlist, PlaylistId, Song
from jukebox.core.filters import SongFilter, filter_songs
from jukebox.core.store import LibraryStore

logger = logging.getLogger(__name__)


class LibraryService:
    """
    High-level facade over the library store.

    Both HTTP surfaces (REST and GraphQL) call into this class and nothing
    else, so they share one contract:
    - synchronous reads for the catalog, single songs, filtering and
      single-playlist lookup
    - coroutines for everything that touches disk; awaiting one is the only
      completion signal, for success and failure alike

    The service keeps no state of its own. Every read goes to the store and
    every write goes through the store before it returns.
    """

    def __init__(self, *, store: LibraryStore) -> None:
        self._store = store

    @property
    def store(self) -> LibraryStore:
        return self._store

    # ---- Catalog ----

    def get_catalog(self) -> tuple[Song, ...]:
        return self._store.load_catalog()

    def get_song(self, song_id: int) -> Song:
        """Raises NotFoundError if the catalog has no such song."""
        return self._store.load_song(song_id)

    def filter_songs(self, field: SongFilter | str | None, value: Any) -> tuple[Song, ...]:
        """Filter the catalog by one field; see `jukebox.core.filters`."""
        return filter_songs(self._store.load_catalog(), field, value)

    # ---- Playlists ----

    async def get_playlists(self) -> tuple[Playlist, ...]:
        return await self._store.load_playlists()

    def get_playlist(self, playlist_id: int) -> Playlist:
        """Raises NotFoundError if the playlist does not exist."""
        return self._store.load_playlist(playlist_id)

    async def create_or_update_playlist(
        self,
        playlist_id: int | None,
        name: str | None,
        song_ids: Iterable[Any] | None,
    ) -> PlaylistId:
        """
        Save a playlist.

        With `playlist_id=None` a new id is allocated; otherwise the playlist
        at that id is fully replaced (or created). Nothing from a previous
        record is merged in.
        """
        new_id = await self._store.save_playlist(playlist_id, name, song_ids)
        if playlist_id is None:
            logger.info("Created playlist %d: %s", new_id, name)
        return new_id

    async def delete_playlist(self, playlist_id: int) -> None:
        """
        Delete a playlist.

        Store failures are logged and not raised: callers report success
        regardless, matching the public API's delete contract.
        """
        try:
            await self._store.delete_playlist(playlist_id)
        except StoreUnavailableError as e:
            logger.warning("Deleting playlist %d failed: %s", playlist_id, e)

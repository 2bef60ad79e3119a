"""
Tests for jukebox.core.library.LibraryService.

The service delegates to LibraryStore; these tests check the contract the
HTTP surfaces rely on, including how failures are delivered.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from jukebox.core import InvalidNameError, NotFoundError, StoreUnavailableError
from jukebox.core.library import LibraryService
from jukebox.core.store import LibraryStore

CATALOG = [
    {"id": 1, "title": "Blue in Green", "artist": "Miles Davis", "album": "Kind of Blue",
     "duration": 337},
    {"id": 2, "title": "Take Five", "artist": "Dave Brubeck", "album": "Time Out",
     "duration": 324},
]


@pytest.fixture
async def store(tmp_path: Path) -> LibraryStore:
    catalog = tmp_path / "library.json"
    catalog.write_text(json.dumps(CATALOG), encoding="utf-8")
    store = LibraryStore(":memory:", catalog_path=catalog)
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def library(store: LibraryStore) -> LibraryService:
    return LibraryService(store=store)


class TestCatalog:
    async def test_get_catalog(self, library: LibraryService) -> None:
        assert [s.title for s in library.get_catalog()] == ["Blue in Green", "Take Five"]

    async def test_get_song(self, library: LibraryService) -> None:
        assert library.get_song(2).artist == "Dave Brubeck"

    async def test_get_song_not_found(self, library: LibraryService) -> None:
        with pytest.raises(NotFoundError):
            library.get_song(42)

    async def test_filter_songs(self, library: LibraryService) -> None:
        assert [s.id for s in library.filter_songs("album", "blue")] == [1]
        assert library.filter_songs("bogus", "x") == library.get_catalog()


class TestPlaylists:
    async def test_create_then_get(self, library: LibraryService) -> None:
        new_id = await library.create_or_update_playlist(None, "Road Trip", [3, 7, 9])
        playlist = library.get_playlist(new_id)
        assert (playlist.id, playlist.name, playlist.songs) == (new_id, "Road Trip", (3, 7, 9))

    async def test_create_after_existing_ids(self, library: LibraryService) -> None:
        await library.create_or_update_playlist(1, "One", [])
        await library.create_or_update_playlist(2, "Two", [])
        assert await library.create_or_update_playlist(None, "Three", [1]) == 3

    async def test_concurrent_creates(self, library: LibraryService) -> None:
        first, second = await asyncio.gather(
            library.create_or_update_playlist(None, "A", [1]),
            library.create_or_update_playlist(None, "B", [2]),
        )
        assert first != second

    async def test_update_is_full_overwrite(self, library: LibraryService) -> None:
        new_id = await library.create_or_update_playlist(None, "Old", [1, 2])
        await library.create_or_update_playlist(new_id, "New", [2])

        playlist = library.get_playlist(new_id)
        assert playlist.name == "New"
        assert playlist.songs == (2,)

    async def test_get_playlists(self, library: LibraryService) -> None:
        await library.create_or_update_playlist(None, "A", [1])
        await library.create_or_update_playlist(None, "B", [])
        assert [p.name for p in await library.get_playlists()] == ["A", "B"]

    async def test_invalid_name_delivered_on_await(self, library: LibraryService) -> None:
        pending = library.create_or_update_playlist(None, "", [1])
        with pytest.raises(InvalidNameError):
            await pending

    async def test_get_playlist_not_found(self, library: LibraryService) -> None:
        with pytest.raises(NotFoundError):
            library.get_playlist(99)

    async def test_delete_missing_playlist_succeeds(self, library: LibraryService) -> None:
        await library.delete_playlist(99)

    async def test_delete(self, library: LibraryService) -> None:
        new_id = await library.create_or_update_playlist(None, "Gone", [])
        await library.delete_playlist(new_id)
        with pytest.raises(NotFoundError):
            library.get_playlist(new_id)


class TestStoreFailures:
    async def test_get_playlists_on_closed_store(
        self, library: LibraryService, store: LibraryStore
    ) -> None:
        await store.close()
        with pytest.raises(StoreUnavailableError):
            await library.get_playlists()

    async def test_delete_swallows_store_failure(
        self, library: LibraryService, store: LibraryStore
    ) -> None:
        await store.close()
        await library.delete_playlist(1)

"""
Tests for jukebox.core.store.

These tests verify:
- LibraryStore open/close lifecycle and catalog import
- Song lookups (catalog order, not-found)
- Playlist id allocation, overwrite, delete
- Persistence across re-open of a file-backed store
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from jukebox.core import InvalidNameError, NotFoundError, StoreUnavailableError
from jukebox.core.store import LibraryStore, Playlist, Song

CATALOG = [
    {"id": 3, "title": "Take Five", "artist": "Dave Brubeck", "album": "Time Out", "duration": 324},
    {"id": 1, "title": "So What", "artist": "Miles Davis", "album": "Kind of Blue", "duration": 562},
    {"id": 7, "title": "Naima", "artist": "John Coltrane", "album": "Giant Steps", "duration": 261},
]


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "library.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture
async def store(catalog_file: Path) -> LibraryStore:
    """Create an in-memory store seeded from the test catalog."""
    store = LibraryStore(":memory:", catalog_path=catalog_file)
    await store.open()
    yield store
    await store.close()


class TestLifecycle:
    """Open/close and catalog import."""

    async def test_open_close(self, catalog_file: Path) -> None:
        store = LibraryStore(":memory:", catalog_path=catalog_file)
        assert not store.is_open

        await store.open()
        assert store.is_open

        await store.close()
        assert not store.is_open

    async def test_open_without_catalog(self) -> None:
        store = LibraryStore(":memory:")
        await store.open()
        try:
            assert store.load_catalog() == ()
        finally:
            await store.close()

    async def test_reads_require_open_store(self) -> None:
        store = LibraryStore(":memory:")
        with pytest.raises(StoreUnavailableError):
            store.load_catalog()

    async def test_missing_catalog_file(self, tmp_path: Path) -> None:
        store = LibraryStore(":memory:", catalog_path=tmp_path / "nope.json")
        with pytest.raises(StoreUnavailableError):
            await store.open()
        assert not store.is_open

    async def test_malformed_catalog_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        store = LibraryStore(":memory:", catalog_path=path)
        with pytest.raises(StoreUnavailableError):
            await store.open()

    async def test_catalog_must_be_array(self, tmp_path: Path) -> None:
        path = tmp_path / "object.json"
        path.write_text(json.dumps({"songs": CATALOG}), encoding="utf-8")
        store = LibraryStore(":memory:", catalog_path=path)
        with pytest.raises(StoreUnavailableError):
            await store.open()

    async def test_unreadable_db_path(self, tmp_path: Path) -> None:
        store = LibraryStore(tmp_path / "missing-dir" / "lib.sqlite3")
        with pytest.raises(StoreUnavailableError):
            await store.open()

    async def test_import_catalog_returns_count(self, tmp_path: Path) -> None:
        path = tmp_path / "more.json"
        path.write_text(
            json.dumps([{"id": 9, "title": "Footprints", "artist": "Wayne Shorter",
                         "album": "Adam's Apple", "duration": 446}]),
            encoding="utf-8",
        )
        store = LibraryStore(":memory:")
        await store.open()
        try:
            assert await store.import_catalog(path) == 1
            assert store.load_song(9).title == "Footprints"
        finally:
            await store.close()


class TestSongs:
    """Catalog reads."""

    async def test_catalog_keeps_file_order(self, store: LibraryStore) -> None:
        assert [s.id for s in store.load_catalog()] == [3, 1, 7]

    async def test_load_song(self, store: LibraryStore) -> None:
        song = store.load_song(1)
        assert song == Song(id=1, title="So What", artist="Miles Davis",
                            album="Kind of Blue", duration=562)

    async def test_every_song_round_trips_by_id(self, store: LibraryStore) -> None:
        for song in store.load_catalog():
            assert store.load_song(song.id) == song

    async def test_load_song_not_found(self, store: LibraryStore) -> None:
        with pytest.raises(NotFoundError):
            store.load_song(42)

    async def test_song_is_frozen(self, store: LibraryStore) -> None:
        song = store.load_song(3)
        with pytest.raises(AttributeError):
            song.title = "Other"  # type: ignore


class TestPlaylists:
    """Playlist save/load/delete."""

    async def test_first_playlist_gets_id_1(self, store: LibraryStore) -> None:
        assert await store.save_playlist(None, "Morning", [1, 3]) == 1

    async def test_new_id_is_max_plus_one(self, store: LibraryStore) -> None:
        await store.save_playlist(None, "One", [])
        await store.save_playlist(None, "Two", [])
        assert await store.save_playlist(None, "Three", [7]) == 3

    async def test_new_id_follows_explicit_ids(self, store: LibraryStore) -> None:
        await store.save_playlist(10, "Ten", [])
        assert await store.save_playlist(None, "Next", []) == 11

    async def test_concurrent_creates_get_distinct_ids(self, store: LibraryStore) -> None:
        await store.save_playlist(None, "One", [])
        await store.save_playlist(None, "Two", [])

        ids = await asyncio.gather(
            *(store.save_playlist(None, f"List {i}", [i]) for i in range(10))
        )

        assert len(set(ids)) == 10
        assert sorted(ids) == list(range(3, 13))

    async def test_concurrent_saves_to_same_id(self, store: LibraryStore) -> None:
        ids = await asyncio.gather(
            store.save_playlist(1, "A", [1, 2, 3]),
            store.save_playlist(1, "B", [4, 5, 6]),
        )
        assert ids == [1, 1]

        # The index agrees with disk, and one save landed whole.
        on_disk = await store.load_playlists()
        assert on_disk == (store.load_playlist(1),)
        assert (on_disk[0].name, on_disk[0].songs) in {("A", (1, 2, 3)), ("B", (4, 5, 6))}

    async def test_concurrent_save_and_delete(self, store: LibraryStore) -> None:
        await store.save_playlist(1, "Old", [1])

        await asyncio.gather(
            store.save_playlist(1, "New", [3, 7]),
            store.delete_playlist(1),
            store.save_playlist(None, "Other", [7]),
        )

        on_disk = {p.id: p for p in await store.load_playlists()}
        for playlist_id, playlist in on_disk.items():
            assert store.load_playlist(playlist_id) == playlist
        if 1 not in on_disk:
            with pytest.raises(NotFoundError):
                store.load_playlist(1)

    async def test_id_outside_sqlite_range(self, store: LibraryStore) -> None:
        with pytest.raises(StoreUnavailableError):
            await store.save_playlist(99999999999999999999, "Huge", [1])

        with pytest.raises(StoreUnavailableError):
            await store.delete_playlist(99999999999999999999)

        # The failed writes leave the store usable.
        assert await store.save_playlist(None, "Next", []) == 1
        assert [p.id for p in await store.load_playlists()] == [1]

    async def test_load_playlist(self, store: LibraryStore) -> None:
        new_id = await store.save_playlist(None, "Road Trip", [3, 7, 9])
        assert store.load_playlist(new_id) == Playlist(id=new_id, name="Road Trip", songs=(3, 7, 9))

    async def test_duplicates_and_unknown_songs_are_kept(self, store: LibraryStore) -> None:
        new_id = await store.save_playlist(None, "Loose", [7, 7, 999])
        assert store.load_playlist(new_id).songs == (7, 7, 999)

    async def test_load_playlist_not_found(self, store: LibraryStore) -> None:
        with pytest.raises(NotFoundError):
            store.load_playlist(5)

    async def test_save_overwrites_fully(self, store: LibraryStore) -> None:
        new_id = await store.save_playlist(None, "Before", [1, 3, 7])
        assert await store.save_playlist(new_id, "After", []) == new_id

        playlist = store.load_playlist(new_id)
        assert playlist.name == "After"
        assert playlist.songs == ()

    async def test_save_with_unknown_id_creates(self, store: LibraryStore) -> None:
        assert await store.save_playlist(4, "Four", [1]) == 4
        assert store.load_playlist(4).name == "Four"

    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_empty_name_rejected(self, store: LibraryStore, name: str | None) -> None:
        with pytest.raises(InvalidNameError):
            await store.save_playlist(None, name, [1])
        assert await store.load_playlists() == ()

    async def test_load_playlists_ordered_by_id(self, store: LibraryStore) -> None:
        await store.save_playlist(5, "Five", [1])
        await store.save_playlist(2, "Two", [3, 7])
        await store.save_playlist(None, "Six", [])

        playlists = await store.load_playlists()
        assert [p.id for p in playlists] == [2, 5, 6]
        assert playlists[0].songs == (3, 7)
        assert playlists[2].songs == ()

    async def test_delete(self, store: LibraryStore) -> None:
        new_id = await store.save_playlist(None, "Gone", [1])
        await store.delete_playlist(new_id)

        with pytest.raises(NotFoundError):
            store.load_playlist(new_id)
        assert await store.load_playlists() == ()

    async def test_delete_missing_is_noop(self, store: LibraryStore) -> None:
        await store.delete_playlist(123)

    async def test_playlists_survive_reopen(self, tmp_path: Path, catalog_file: Path) -> None:
        db_path = tmp_path / "lib.sqlite3"

        store = LibraryStore(db_path, catalog_path=catalog_file)
        await store.open()
        new_id = await store.save_playlist(None, "Kept", [7, 1])
        await store.close()

        reopened = LibraryStore(db_path, catalog_path=catalog_file)
        await reopened.open()
        try:
            assert reopened.load_playlist(new_id) == Playlist(id=new_id, name="Kept", songs=(7, 1))
            # Catalog is imported once, not duplicated on re-open.
            assert len(reopened.load_catalog()) == len(CATALOG)
        finally:
            await reopened.close()

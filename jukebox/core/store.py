"""
Library store: songs and playlists on disk.

Goals:
- SQLite + aiosqlite, async/await friendly.
- One owner of the backing data. Everything else goes through this class.
- Songs are read-only once imported; playlists are read-write by id.

The song catalog is loaded into memory when the store opens. Playlists are
kept in a write-through index next to the DB so that single-id lookups never
suspend; every write hits SQLite (and commits) before the index is updated.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

import aiosqlite

from jukebox.core import (
    AllocationConflictError,
    InvalidNameError,
    NotFoundError,
    StoreUnavailableError,
)
from jukebox.core.db.models import (
    Playlist,
    PlaylistId,
    Song,
    SongId,
    normalize_name,
    normalize_song_ids,
)
from jukebox.core.db.schema import ensure_schema

logger = logging.getLogger(__name__)


@contextmanager
def _wrap_io(action: str) -> Iterator[None]:
    """Translate storage-level failures into StoreUnavailableError."""
    try:
        yield
    except (aiosqlite.Error, OSError, OverflowError) as e:
        raise StoreUnavailableError(f"Could not {action}: {e}") from e


class LibraryStore:
    """
    Async access layer for the song catalog and playlists.

    Usage:
        store = LibraryStore("jukebox.sqlite3", catalog_path=Path("data/library.json"))
        await store.open()
        ... queries ...
        await store.close()

    Notes:
    - Construct one store per process and pass it to whoever needs it.
    - Connections are not pooled; we keep a single connection.
    - Write transactions share one connection, so they run one at a time
      under a lock. Concurrent saves to the same id: last write wins, and
      each save lands whole.
    """

    def __init__(self, db_path: str | Path, *, catalog_path: str | Path | None = None) -> None:
        self._db_path = str(db_path)
        self._catalog_path = Path(catalog_path) if catalog_path is not None else None
        self._conn: aiosqlite.Connection | None = None
        self._songs: tuple[Song, ...] = ()
        self._songs_by_id: dict[int, Song] = {}
        self._playlists: dict[int, Playlist] = {}
        # Serializes every write transaction (and disk reads of playlists) on the
        # shared connection; new-id allocation happens inside it.
        self._write_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def catalog_path(self) -> Path | None:
        return self._catalog_path

    async def open(self) -> None:
        """
        Open the DB, create tables and load the catalog.

        If the songs table is empty and a catalog file is configured, the
        file is imported first.
        """
        if self._conn is not None:
            return

        with _wrap_io(f"open library DB {self._db_path}"):
            conn = await aiosqlite.connect(self._db_path)

        try:
            with _wrap_io("prepare library DB"):
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA foreign_keys = ON;")
                await conn.execute("PRAGMA synchronous = NORMAL;")
                await ensure_schema(conn)
            self._conn = conn

            if self._catalog_path is not None and await self._count_songs() == 0:
                await self.import_catalog(self._catalog_path)

            await self._reload_catalog()
            with _wrap_io("load playlists"):
                self._playlists = {p.id: p for p in await self._fetch_playlists()}
        except BaseException:
            self._conn = None
            await conn.close()
            raise

        logger.info(
            "Library store opened (%d songs, %d playlists)",
            len(self._songs),
            len(self._playlists),
        )

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None
        self._songs = ()
        self._songs_by_id = {}
        self._playlists = {}

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StoreUnavailableError("LibraryStore is not open. Call await store.open() first.")
        return self._conn

    # ===========================================================================
    # Songs
    # ===========================================================================

    async def import_catalog(self, path: str | Path) -> int:
        """
        Import songs from a JSON catalog file.

        The file holds an array of objects with `id`, `title`, `artist`,
        `album` and `duration`. Existing songs with the same id are replaced.
        Catalog order is the order of the array.

        Returns:
            Number of songs imported.
        """
        conn = self._require_conn()
        catalog_file = Path(path)

        with _wrap_io(f"read catalog {catalog_file}"):
            raw = await asyncio.to_thread(catalog_file.read_text, encoding="utf-8")

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreUnavailableError(f"Catalog {catalog_file} is not valid JSON: {e}") from e
        if not isinstance(entries, list):
            raise StoreUnavailableError(f"Catalog {catalog_file} must contain a JSON array")

        try:
            songs = [Song.from_mapping(entry) for entry in entries]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreUnavailableError(f"Malformed song entry in {catalog_file}: {e}") from e

        async with self._write_lock:
            try:
                with _wrap_io("import catalog"):
                    cursor = await conn.execute("SELECT COALESCE(MAX(position), -1) FROM songs;")
                    row = await cursor.fetchone()
                    start = int(row[0]) + 1 if row is not None else 0

                    await conn.executemany(
                        """
                        INSERT INTO songs(id, position, title, artist, album, duration)
                        VALUES (?, ?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            title    = excluded.title,
                            artist   = excluded.artist,
                            album    = excluded.album,
                            duration = excluded.duration
                        """,
                        [
                            (s.id, start + i, s.title, s.artist, s.album, s.duration)
                            for i, s in enumerate(songs)
                        ],
                    )
                    await conn.commit()
            except BaseException:
                await self._rollback(conn)
                raise

        await self._reload_catalog()
        logger.info("Imported %d songs from %s", len(songs), catalog_file)
        return len(songs)

    def load_catalog(self) -> tuple[Song, ...]:
        """Return all songs in catalog order."""
        self._require_conn()
        return self._songs

    def load_song(self, song_id: int) -> Song:
        """Return a single song or raise NotFoundError."""
        self._require_conn()
        song = self._songs_by_id.get(song_id)
        if song is None:
            raise NotFoundError(f"Song {song_id} not found")
        return song

    async def _count_songs(self) -> int:
        conn = self._require_conn()
        with _wrap_io("count songs"):
            cursor = await conn.execute("SELECT COUNT(*) FROM songs;")
            row = await cursor.fetchone()
        return int(row[0]) if row is not None else 0

    async def _reload_catalog(self) -> None:
        conn = self._require_conn()
        with _wrap_io("load catalog"):
            cursor = await conn.execute(
                "SELECT id, title, artist, album, duration FROM songs ORDER BY position, id;"
            )
            rows = await cursor.fetchall()
        self._songs = tuple(Song.from_mapping(dict(r)) for r in rows)
        self._songs_by_id = {s.id: s for s in self._songs}

    # ===========================================================================
    # Playlists
    # ===========================================================================

    async def load_playlists(self) -> tuple[Playlist, ...]:
        """Read every playlist from disk, ordered by id."""
        self._require_conn()
        async with self._write_lock:
            with _wrap_io("load playlists"):
                return await self._fetch_playlists()

    def load_playlist(self, playlist_id: int) -> Playlist:
        """Return a single playlist or raise NotFoundError."""
        self._require_conn()
        playlist = self._playlists.get(playlist_id)
        if playlist is None:
            raise NotFoundError(f"Playlist {playlist_id} not found")
        return playlist

    async def save_playlist(
        self,
        playlist_id: int | None,
        name: str | None,
        song_ids: Iterable[Any] | None,
    ) -> PlaylistId:
        """
        Insert or overwrite a playlist.

        Args:
            playlist_id: Existing/target id, or None to allocate a new one.
            name: Playlist name (must not be empty).
            song_ids: Ordered song ids. Not validated against the catalog.

        Returns:
            The playlist id (newly allocated or the one given).
        """
        if normalize_name(name) is None:
            raise InvalidNameError("Playlist name must not be empty")
        name = str(name)
        songs = normalize_song_ids(song_ids)
        conn = self._require_conn()

        async with self._write_lock:
            try:
                if playlist_id is None:
                    with _wrap_io("allocate playlist id"):
                        cursor = await conn.execute("SELECT COALESCE(MAX(id), 0) FROM playlists;")
                        row = await cursor.fetchone()
                    target = PlaylistId(int(row[0]) + 1 if row is not None else 1)

                    with _wrap_io(f"create playlist {target}"):
                        try:
                            await conn.execute(
                                "INSERT INTO playlists(id, name) VALUES (?, ?);", (target, name)
                            )
                        except aiosqlite.IntegrityError as e:
                            raise AllocationConflictError(
                                f"Playlist id {target} was taken during allocation"
                            ) from e
                        await self._write_songs(conn, target, songs)
                        await conn.commit()
                else:
                    target = PlaylistId(int(playlist_id))
                    with _wrap_io(f"save playlist {target}"):
                        await conn.execute(
                            """
                            INSERT INTO playlists(id, name) VALUES (?, ?)
                            ON CONFLICT(id) DO UPDATE SET name = excluded.name
                            """,
                            (target, name),
                        )
                        await conn.execute(
                            "DELETE FROM playlist_songs WHERE playlist_id = ?;", (target,)
                        )
                        await self._write_songs(conn, target, songs)
                        await conn.commit()
            except BaseException:
                await self._rollback(conn)
                raise

            self._playlists[target] = Playlist(id=target, name=name, songs=songs)

        logger.debug(
            "%s playlist %d (%d songs)",
            "Created" if playlist_id is None else "Saved",
            target,
            len(songs),
        )
        return target

    async def delete_playlist(self, playlist_id: int) -> None:
        """Remove a playlist. Deleting an absent id is a no-op."""
        conn = self._require_conn()
        async with self._write_lock:
            try:
                with _wrap_io(f"delete playlist {playlist_id}"):
                    cursor = await conn.execute(
                        "DELETE FROM playlists WHERE id = ?;", (playlist_id,)
                    )
                    await conn.commit()
            except BaseException:
                await self._rollback(conn)
                raise

            self._playlists.pop(playlist_id, None)

        if cursor.rowcount:
            logger.debug("Deleted playlist %d", playlist_id)

    async def _fetch_playlists(self) -> tuple[Playlist, ...]:
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT p.id AS id, p.name AS name, ps.song_id AS song_id
            FROM playlists p
            LEFT JOIN playlist_songs ps ON ps.playlist_id = p.id
            ORDER BY p.id, ps.position
            """
        )
        rows = await cursor.fetchall()

        names: dict[int, str] = {}
        songs: dict[int, list[int]] = {}
        for r in rows:
            pid = int(r["id"])
            names[pid] = r["name"]
            bucket = songs.setdefault(pid, [])
            if r["song_id"] is not None:
                bucket.append(int(r["song_id"]))

        return tuple(
            Playlist(id=PlaylistId(pid), name=names[pid], songs=tuple(songs[pid])) for pid in names
        )

    @staticmethod
    async def _write_songs(
        conn: aiosqlite.Connection,
        playlist_id: int,
        songs: tuple[int, ...],
    ) -> None:
        if not songs:
            return
        await conn.executemany(
            "INSERT INTO playlist_songs(playlist_id, position, song_id) VALUES (?, ?, ?);",
            [(playlist_id, pos, song_id) for pos, song_id in enumerate(songs)],
        )

    @staticmethod
    async def _rollback(conn: aiosqlite.Connection) -> None:
        try:
            await conn.rollback()
        except aiosqlite.Error as e:
            logger.warning("Rollback failed: %s", e)


__all__ = ["LibraryStore", "Playlist", "PlaylistId", "Song", "SongId"]

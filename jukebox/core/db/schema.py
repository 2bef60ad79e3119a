"""
Database schema for the Jukebox library store.

Connection management and the public `LibraryStore` facade live in
`jukebox.core.store`; table creation lives here.

Design notes:
- Tables are created with `IF NOT EXISTS`; there are no migrations.
- `playlist_songs.song_id` has no FK to `songs`: playlists may reference ids
  that are not (or no longer) in the catalog.
"""

from __future__ import annotations

import aiosqlite


async def ensure_schema(conn: aiosqlite.Connection) -> None:
    """
    Create the library tables if they are missing.

    This function assumes:
    - `conn` is an open aiosqlite connection
    - foreign_keys pragma is enabled by the caller (cascade deletes rely on it)
    """
    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS songs (
            id INTEGER PRIMARY KEY,
            position INTEGER NOT NULL,
            title TEXT NOT NULL DEFAULT '',
            artist TEXT NOT NULL DEFAULT '',
            album TEXT NOT NULL DEFAULT '',
            duration INTEGER NOT NULL DEFAULT 0
        )
        """
    )

    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS playlists (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL
        )
        """
    )

    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS playlist_songs (
            playlist_id INTEGER NOT NULL REFERENCES playlists(id) ON DELETE CASCADE,
            position INTEGER NOT NULL,
            song_id INTEGER NOT NULL,
            PRIMARY KEY (playlist_id, position)
        )
        """
    )

    await conn.commit()

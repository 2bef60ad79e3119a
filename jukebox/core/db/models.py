"""
Library records and small normalization helpers.

This module is intentionally lightweight:
- No DB connection knowledge
- No SQL
- Pure dataclasses + helper functions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, NewType

SongId = NewType("SongId", int)
PlaylistId = NewType("PlaylistId", int)


@dataclass(frozen=True, slots=True)
class Song:
    """Catalog entry. Songs are read-only once the catalog is loaded."""

    id: SongId
    title: str
    artist: str
    album: str
    duration: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Song:
        """Build a song from a catalog JSON object or a DB row."""
        return cls(
            id=SongId(int(data["id"])),
            title=str(data.get("title") or ""),
            artist=str(data.get("artist") or ""),
            album=str(data.get("album") or ""),
            duration=int(data.get("duration") or 0),
        )


@dataclass(frozen=True, slots=True)
class Playlist:
    """
    User playlist as stored in SQLite.

    `songs` keeps insertion order. Duplicates and ids that are not in the
    catalog are kept as given.
    """

    id: PlaylistId
    name: str
    songs: tuple[int, ...] = ()


def normalize_name(value: str | None) -> str | None:
    """
    Normalize a playlist name:
    - strip whitespace
    - coerce empty strings to None
    """
    if value is None:
        return None
    v = str(value).strip()
    return v if v else None


def normalize_song_ids(values: Iterable[Any] | None) -> tuple[int, ...]:
    """Coerce a song id sequence to a tuple of ints (order and duplicates kept)."""
    if values is None:
        return ()
    return tuple(int(v) for v in values)

"""
Song filtering.

A filter is selected by field name at runtime (the GraphQL surface passes it
as a plain string). Names are parsed into a closed `SongFilter` enum up
front; anything unknown becomes `SongFilter.ALL`, which passes the catalog
through unchanged.

Matching rules:
- album/title/artist: case-insensitive substring match
- duration: exact equality with the raw value (no coercion, so "200" != 200)
- id: exact equality against the song *title* (kept for parity with the
  existing public API; see DESIGN.md)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable

from jukebox.core.db.models import Song


class SongFilter(Enum):
    """Supported filter kinds."""

    ALBUM = "album"
    TITLE = "title"
    ARTIST = "artist"
    DURATION = "duration"
    ID = "id"
    ALL = "all"

    @classmethod
    def parse(cls, name: str | None) -> SongFilter:
        """Map a field name to a filter kind; unknown or missing names give ALL."""
        if name is None:
            return cls.ALL
        try:
            kind = cls(name)
        except ValueError:
            return cls.ALL
        return kind


def _contains(text: str, value: Any) -> bool:
    if value is None:
        return False
    return str(value).lower() in text.lower()


def _same_value(actual: Any, value: Any) -> bool:
    # Exact type and value; bool is not an int here.
    return type(actual) is type(value) and actual == value


_MATCHERS: dict[SongFilter, Callable[[Song, Any], bool]] = {
    SongFilter.ALBUM: lambda s, v: _contains(s.album, v),
    SongFilter.TITLE: lambda s, v: _contains(s.title, v),
    SongFilter.ARTIST: lambda s, v: _contains(s.artist, v),
    SongFilter.DURATION: lambda s, v: _same_value(s.duration, v),
    SongFilter.ID: lambda s, v: _same_value(s.title, v),
}


def filter_songs(
    songs: Iterable[Song],
    field: SongFilter | str | None,
    value: Any,
) -> tuple[Song, ...]:
    """
    Filter songs by one field.

    Args:
        songs: Catalog to filter (order is preserved).
        field: Filter kind, or a field name to parse.
        value: Comparison value.

    Returns:
        Matching songs, or every song for SongFilter.ALL.
    """
    kind = field if isinstance(field, SongFilter) else SongFilter.parse(field)
    if kind is SongFilter.ALL:
        return tuple(songs)

    match = _MATCHERS[kind]
    return tuple(s for s in songs if match(s, value))

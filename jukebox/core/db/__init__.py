"""
Internal DB subpackage for Jukebox.

Keeps the record types and the schema apart from `LibraryStore`, which stays
the single public interface the rest of the codebase imports.
"""

from __future__ import annotations

# Models / DTOs
from .models import Playlist, PlaylistId, Song, SongId

# Schema
from .schema import ensure_schema

__all__ = [
    # models
    "Playlist",
    "PlaylistId",
    "Song",
    "SongId",
    # schema
    "ensure_schema",
]

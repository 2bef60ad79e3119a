"""
JSON shapes for library records.

Both the REST routes and the GraphQL handler return songs and playlists in
the same shape: the dataclass fields, with playlist songs as a plain list.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from jukebox.core.db.models import Playlist, Song


def song_to_dict(song: Song) -> dict[str, Any]:
    return asdict(song)


def playlist_to_dict(playlist: Playlist) -> dict[str, Any]:
    return {
        "id": playlist.id,
        "name": playlist.name,
        "songs": list(playlist.songs),
    }

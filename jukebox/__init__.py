"""
Jukebox - a small song catalog and playlist service.

Jukebox serves one song catalog and user playlists over two surfaces, a REST
API and a GraphQL endpoint, both backed by the same LibraryService.
"""

__version__ = "0.1.0"

from jukebox.server import JukeboxServer

__all__ = ["JukeboxServer", "__version__"]

"""
Web Routes Package.

This package contains FastAPI route modules:
- library: song catalog (/library)
- playlist: playlist CRUD (/playlist)
- graphql: GraphQL endpoint (/graphql)
"""

from jukebox.web.routes.graphql import register_graphql_routes
from jukebox.web.routes.library import register_library_routes
from jukebox.web.routes.playlist import register_playlist_routes

__all__ = [
    "register_graphql_routes",
    "register_library_routes",
    "register_playlist_routes",
]

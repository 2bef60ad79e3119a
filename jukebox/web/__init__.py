"""
Jukebox Web Layer.

This package provides the HTTP layer for Jukebox: a REST API and a GraphQL
endpoint, both translating requests into LibraryService calls.

Components:
- WebServer: FastAPI application with all routes
- GraphQLHandler: schema + resolvers for the /graphql endpoint
"""

from jukebox.web.graphql_api import GraphQLHandler
from jukebox.web.server import WebServer

__all__ = [
    "GraphQLHandler",
    "WebServer",
]

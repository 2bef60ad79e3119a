"""
Web Server Module for Jukebox.

This module provides the WebServer class that creates and manages the
FastAPI application, registers all routes, and maps core errors to HTTP
responses.

The WebServer integrates:
- REST API for the song catalog and playlists
- GraphQL endpoint over the same LibraryService
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Sequence

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jukebox import __version__
from jukebox.core import StoreUnavailableError
from jukebox.web.graphql_api import GraphQLHandler
from jukebox.web.routes.graphql import register_graphql_routes
from jukebox.web.routes.library import register_library_routes
from jukebox.web.routes.playlist import register_playlist_routes

if TYPE_CHECKING:
    from jukebox.core.library import LibraryService

logger = logging.getLogger(__name__)


class WebServer:
    """
    FastAPI-based web server for Jukebox.

    Both surfaces (REST and GraphQL) are thin adapters over one
    LibraryService passed in by the caller.
    """

    def __init__(
        self,
        library: LibraryService,
        *,
        cors_origins: Sequence[str] = ("*",),
    ) -> None:
        """
        Initialize the WebServer.

        Args:
            library: Library service answering every request
            cors_origins: Allowed CORS origins
        """
        self.library = library

        # Create FastAPI app
        self.app = FastAPI(
            title="Jukebox",
            description="Song catalog and playlists over REST and GraphQL",
            version=__version__,
        )

        # Add CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Create GraphQL handler
        self.graphql_handler = GraphQLHandler(library)

        # Server state
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task | None = None
        self._host = "0.0.0.0"
        self._port = 9000

        # Register routes
        self._register_routes()

    def _register_routes(self) -> None:
        """Register all routes and error handlers with the FastAPI app."""

        @self.app.exception_handler(StoreUnavailableError)
        async def store_unavailable_handler(
            request: Request, exc: StoreUnavailableError
        ) -> JSONResponse:
            logger.error(
                "Store unavailable during %s %s: %s", request.method, request.url.path, exc
            )
            return JSONResponse(status_code=503, content={"detail": str(exc)})

        # Health check
        @self.app.get("/health")
        async def health_check() -> dict[str, str]:
            """Health check endpoint."""
            return {"status": "ok", "server": "jukebox"}

        register_library_routes(self.app, self.library)
        register_playlist_routes(self.app, self.library)
        register_graphql_routes(self.app, self.graphql_handler)

    async def start(self, host: str = "0.0.0.0", port: int = 9000) -> None:
        """
        Start the web server.

        Args:
            host: Host address to bind to
            port: Port to listen on
        """
        self._host = host
        self._port = port

        # Configure uvicorn
        config = uvicorn.Config(
            self.app,
            host=host,
            port=port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)

        # Start server in background
        self._serve_task = asyncio.create_task(self._server.serve())

        logger.info("Web server started on http://%s:%d", host, port)

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server is not None:
            self._server.should_exit = True
            self._server = None

        if self._serve_task is not None:
            await self._serve_task
            self._serve_task = None

        logger.info("Web server stopped")

    @property
    def port(self) -> int:
        """Get the server port."""
        return self._port

    @property
    def host(self) -> str:
        """Get the server host."""
        return self._host

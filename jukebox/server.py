"""
Jukebox - Main Server Module

This module contains the JukeboxServer class that wires the components
together and manages the application lifecycle.
"""

import asyncio
import logging
import signal

from jukebox.config import Settings
from jukebox.core.library import LibraryService
from jukebox.core.store import LibraryStore
from jukebox.web.server import WebServer

logger = logging.getLogger(__name__)


class JukeboxServer:
    """
    Main Jukebox server that coordinates all components.

    Ownership is explicit: the server constructs the one LibraryStore for the
    process, hands it to the LibraryService, and hands the service to the web
    server. Nothing else creates a store.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize the Jukebox server.

        Args:
            settings: Runtime settings (defaults if None).
        """
        self.settings = settings or Settings()

        self.store = LibraryStore(
            self.settings.db_path,
            catalog_path=self.settings.catalog_path,
        )
        self.library = LibraryService(store=self.store)
        self.web_server = WebServer(self.library, cors_origins=self.settings.cors_origins)

        # Server state
        self._running = False
        self._shutdown_event: asyncio.Event | None = None

    async def start(self) -> None:
        """Start all server components."""
        logger.info("Starting Jukebox server on %s:%d", self.settings.host, self.settings.port)

        self._running = True
        self._shutdown_event = asyncio.Event()

        # Open the store first; the web server must not answer before the catalog is loaded.
        await self.store.open()

        await self.web_server.start(host=self.settings.host, port=self.settings.port)

        logger.info("Jukebox server started successfully")

    async def stop(self) -> None:
        """Stop all server components gracefully."""
        if not self._running:
            return

        logger.info("Stopping Jukebox server...")
        self._running = False

        await self.web_server.stop()

        # Close the store last, after the web server stopped taking requests.
        await self.store.close()

        if self._shutdown_event:
            self._shutdown_event.set()

        logger.info("Jukebox server stopped")

    async def run(self) -> None:
        """
        Run the server until shutdown is requested.

        This method starts all components and waits for a shutdown signal
        (SIGINT or SIGTERM).
        """
        await self.start()

        # Set up signal handlers for graceful shutdown
        loop = asyncio.get_running_loop()

        def handle_signal() -> None:
            logger.info("Received shutdown signal")
            if self._shutdown_event:
                self._shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, handle_signal)
            except NotImplementedError:
                # Signal handlers not supported on Windows
                pass

        # Wait for shutdown
        if self._shutdown_event:
            await self._shutdown_event.wait()

        await self.stop()

    @property
    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

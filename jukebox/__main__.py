"""
Jukebox - Entry Point

Run with: python -m jukebox
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from jukebox import __version__
from jukebox.config import ConfigError, Settings, load_settings
from jukebox.server import JukeboxServer


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="jukebox",
        description="Jukebox - song catalog and playlists over REST and GraphQL",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file (default: bundled jukebox.toml)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address to bind to (default: 0.0.0.0)",
    )

    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="HTTP port (default: 9000)",
    )

    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the library SQLite file",
    )

    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="JSON song catalog imported into an empty library",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Load the config file and apply command line overrides."""
    settings = load_settings(args.config)
    return settings.with_overrides(
        host=args.host,
        port=args.port,
        db_path=args.db,
        catalog_path=args.catalog,
    )


async def run_server(settings: Settings) -> None:
    """Start and run the Jukebox server."""
    server = JukeboxServer(settings)
    await server.run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        settings = build_settings(args)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2

    logger.info("Starting Jukebox...")

    try:
        asyncio.run(run_server(settings))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1

    logger.info("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

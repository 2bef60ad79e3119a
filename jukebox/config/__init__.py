"""
Configuration management for Jukebox.

Settings are read from a TOML file. The bundled `jukebox.toml` next to this
module holds the defaults; a user file passed with `--config` is read instead,
and any key it leaves out falls back to the built-in default.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Path to the config directory
CONFIG_DIR = Path(__file__).parent


class ConfigError(ValueError):
    """Raised when a configuration file is missing or has invalid values."""


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the service."""

    host: str = "0.0.0.0"
    port: int = 9000
    db_path: Path = Path("jukebox-library.sqlite3")
    catalog_path: Path | None = Path("data/library.json")
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with every non-None override applied (used for CLI flags)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _parse_settings(data: dict[str, Any]) -> Settings:
    """Parse the `[server]` and `[library]` sections from the TOML data."""
    defaults = Settings()
    server = data.get("server", {})
    library = data.get("library", {})
    if not isinstance(server, dict) or not isinstance(library, dict):
        raise ConfigError("[server] and [library] must be tables")

    port = server.get("port", defaults.port)
    if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
        raise ConfigError(f"server.port must be an integer between 1 and 65535, got {port!r}")

    origins = server.get("cors_origins", defaults.cors_origins)
    if not isinstance(origins, list) or not all(isinstance(o, str) for o in origins):
        raise ConfigError("server.cors_origins must be a list of strings")

    db_path = library.get("db_path", str(defaults.db_path))
    if not isinstance(db_path, str) or not db_path:
        raise ConfigError(f"library.db_path must be a non-empty string, got {db_path!r}")

    # An empty catalog path disables the catalog import.
    catalog = library.get("catalog_path", str(defaults.catalog_path))
    if not isinstance(catalog, str):
        raise ConfigError(f"library.catalog_path must be a string, got {catalog!r}")

    return Settings(
        host=str(server.get("host", defaults.host)),
        port=port,
        db_path=Path(db_path),
        catalog_path=Path(catalog) if catalog else None,
        cors_origins=list(origins),
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """
    Load settings from a TOML file.

    Args:
        config_path: Path to a config file. If None, uses the bundled default.

    Returns:
        Loaded Settings instance.
    """
    if config_path is None:
        config_path = CONFIG_DIR / "jukebox.toml"

    logger.debug("Loading config from %s", config_path)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return _parse_settings(data)


__all__ = ["CONFIG_DIR", "ConfigError", "Settings", "load_settings"]

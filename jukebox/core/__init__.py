"""
Core domain package.

This package contains the library logic which should be independent of any
HTTP surface (REST, GraphQL, CLI). The goal is to keep this layer small,
testable, and free of networking concerns.

We intentionally keep exports minimal; consumers should usually import from the
specific module they need (e.g. `jukebox.core.library`).
"""

from __future__ import annotations

__all__: list[str] = [
    "AllocationConflictError",
    "CoreError",
    "InvalidNameError",
    "NotFoundError",
    "StoreUnavailableError",
]


class CoreError(Exception):
    """Base class for core-layer exceptions."""


class NotFoundError(CoreError):
    """Raised when a song or playlist cannot be found by id."""


class InvalidNameError(CoreError, ValueError):
    """Raised when a playlist is saved with an empty name."""


class StoreUnavailableError(CoreError):
    """Raised when the backing data cannot be read or written."""


class AllocationConflictError(CoreError):
    """Raised when a freshly allocated playlist id is already taken."""

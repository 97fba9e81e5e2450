"""API endpoints."""

from vidshelf.api import health, library, metrics, youtube

__all__ = [
    "health",
    "library",
    "metrics",
    "youtube",
]

"""Pytest configuration and shared fixtures"""

import os
from datetime import datetime, timezone
from typing import Any, Dict

import pytest

from vidshelf.core.display import DisplayFormatter

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables before each test"""
    # Clear any APP_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("APP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def formatter() -> DisplayFormatter:
    """Display formatter pinned to a fixed clock."""
    return DisplayFormatter(clock=lambda: FIXED_NOW)


@pytest.fixture
def sample_item() -> Dict[str, Any]:
    """Sample YouTube Data API video item."""
    return {
        "kind": "youtube#video",
        "id": "dQw4w9WgXcQ",
        "snippet": {
            "publishedAt": "2009-10-25T06:57:33Z",
            "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw",
            "title": "Rick Astley - Never Gonna Give You Up",
            "description": "The official video",
            "thumbnails": {
                "default": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"},
                "high": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"},
            },
            "channelTitle": "Rick Astley",
        },
        "statistics": {"viewCount": "1234567", "likeCount": "100"},
    }

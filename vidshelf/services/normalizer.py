"""Normalization of YouTube Data API video resources into VideoRecords."""

from typing import Any, Dict, Mapping, Optional

import structlog

from vidshelf.core.display import DisplayFormatter, parse_timestamp
from vidshelf.models.video import VideoRecord
from vidshelf.providers.exceptions import MalformedProviderResponseError, MissingThumbnailError

logger = structlog.get_logger(__name__)


def _thumbnail_url(snippet: Mapping[str, Any]) -> str:
    thumbnails = snippet.get("thumbnails")
    if not isinstance(thumbnails, Mapping):
        thumbnails = {}
    for variant in ("high", "default"):
        entry = thumbnails.get(variant) or {}
        url = entry.get("url") if isinstance(entry, Mapping) else None
        if url:
            return str(url)
    raise MissingThumbnailError("Provider item has no usable thumbnail")


def _view_count(item: Mapping[str, Any], video_id: str) -> int:
    statistics = item.get("statistics") or {}
    raw = statistics.get("viewCount", 0) if isinstance(statistics, Mapping) else 0
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        logger.warning("view_count_unparseable", video_id=video_id, view_count=raw)
        return 0


def normalize_video(
    item: Dict[str, Any],
    video_id: str,
    formatter: Optional[DisplayFormatter] = None,
) -> VideoRecord:
    """
    Map a raw provider video resource to a flat VideoRecord.

    added_at is left empty; the collection store stamps it on insert.

    Args:
        item: Raw video resource (snippet + statistics)
        video_id: The identifier used to fetch the item
        formatter: Display formatter for the snapshot strings

    Returns:
        The normalized record, with no subtitle

    Raises:
        MalformedProviderResponseError: If snippet or publishedAt is unusable
        MissingThumbnailError: If neither a high nor a default thumbnail exists
    """
    formatter = formatter or DisplayFormatter()

    snippet = item.get("snippet") if isinstance(item, Mapping) else None
    if not isinstance(snippet, Mapping):
        raise MalformedProviderResponseError("Video details are unavailable")

    try:
        published = parse_timestamp(snippet.get("publishedAt", ""))
    except ValueError as e:
        raise MalformedProviderResponseError(
            f"Unparseable publish timestamp: {snippet.get('publishedAt')!r}"
        ) from e

    return VideoRecord(
        id=video_id,
        title=str(snippet.get("title", "")),
        description=str(snippet.get("description", "")),
        thumbnail=_thumbnail_url(snippet),
        channel_title=str(snippet.get("channelTitle", "")),
        published_at=formatter.format_date(published),
        view_count=formatter.format_count(_view_count(item, video_id)),
    )

"""Video bookmark data models.

Records are stored with the camelCase field names the persisted slot has
always used, so to_dict/from_dict translate between the two namings.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


@dataclass
class SubtitleAttachment:
    """A user-supplied subtitle file, kept verbatim."""

    name: str
    size: int  # bytes
    content: str
    uploaded_at: str

    @property
    def size_kb(self) -> str:
        """Size in kilobytes with one decimal, e.g. "1.5"."""
        return f"{self.size / 1024:.1f}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "content": self.content,
            "uploadedAt": self.uploaded_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubtitleAttachment":
        return cls(
            name=str(data["name"]),
            size=int(data["size"]),
            content=str(data["content"]),
            uploaded_at=str(data.get("uploadedAt", "")),
        )


@dataclass
class VideoRecord:
    """One bookmarked video.

    published_at, view_count and added_at are display strings baked at add
    time; they are never re-derived from provider data.
    """

    id: str
    title: str
    description: str
    thumbnail: str
    channel_title: str
    published_at: str
    view_count: str
    added_at: str = ""
    subtitle: Optional[SubtitleAttachment] = None

    @property
    def watch_url(self) -> str:
        """Link-out URL on YouTube."""
        return WATCH_URL_TEMPLATE.format(video_id=self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to its persisted dictionary shape."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "channelTitle": self.channel_title,
            "publishedAt": self.published_at,
            "viewCount": self.view_count,
            "addedAt": self.added_at,
            "subtitle": self.subtitle.to_dict() if self.subtitle else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VideoRecord":
        """Build a record from its persisted dictionary shape.

        Raises:
            KeyError: If the id field is missing.
            TypeError, ValueError: If a field has an unusable type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")

        subtitle_data = data.get("subtitle")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            thumbnail=str(data.get("thumbnail", "")),
            channel_title=str(data.get("channelTitle", "")),
            published_at=str(data.get("publishedAt", "")),
            view_count=str(data.get("viewCount", "0")),
            added_at=str(data.get("addedAt", "")),
            subtitle=SubtitleAttachment.from_dict(subtitle_data) if subtitle_data else None,
        )

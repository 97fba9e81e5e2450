"""Request and response schemas for API endpoints.

This module provides Pydantic models for API request validation
and response serialization with OpenAPI examples.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from vidshelf.models.video import SubtitleAttachment, VideoRecord
from vidshelf.services.notifications import Notification


class AddVideoRequest(BaseModel):
    """Request body for adding a video."""

    input: str = Field(
        ...,
        description="YouTube video URL or 11-character video ID",
        examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"],
    )


class SubtitleUploadRequest(BaseModel):
    """Request body for attaching a subtitle file."""

    name: str = Field(..., description="Original filename", examples=["episode-01.srt"])
    content: str = Field(
        ...,
        description="File content decoded as UTF-8 text",
        examples=["1\n00:00:01,000 --> 00:00:02,000\nHello\n"],
    )


class SubtitleResponse(BaseModel):
    """Subtitle metadata. The content itself is served by the download endpoint."""

    name: str = Field(..., examples=["episode-01.srt"])
    size: int = Field(..., description="Size in bytes", examples=[1536])
    size_kb: str = Field(..., examples=["1.5"])
    uploaded_at: str = Field(..., examples=["2024/01/15 10:30:00"])

    @classmethod
    def from_attachment(cls, attachment: SubtitleAttachment) -> "SubtitleResponse":
        return cls(
            name=attachment.name,
            size=attachment.size,
            size_kb=attachment.size_kb,
            uploaded_at=attachment.uploaded_at,
        )


class VideoResponse(BaseModel):
    """A bookmarked video."""

    index: int = Field(..., description="Position in the collection", examples=[0])
    id: str = Field(..., examples=["dQw4w9WgXcQ"])
    title: str = Field(..., examples=["Rick Astley - Never Gonna Give You Up"])
    description: str = Field(..., examples=["The official video for Never Gonna Give You Up"])
    thumbnail: str = Field(..., examples=["https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"])
    channel_title: str = Field(..., examples=["Rick Astley"])
    published_at: str = Field(..., examples=["2009/10/25"])
    view_count: str = Field(..., examples=["1,500,000,000"])
    added_at: str = Field(..., examples=["2024/01/15 10:30:00"])
    watch_url: str = Field(..., examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])
    subtitle: Optional[SubtitleResponse] = None

    @classmethod
    def from_record(cls, record: VideoRecord, index: int) -> "VideoResponse":
        return cls(
            index=index,
            id=record.id,
            title=record.title,
            description=record.description,
            thumbnail=record.thumbnail,
            channel_title=record.channel_title,
            published_at=record.published_at,
            view_count=record.view_count,
            added_at=record.added_at,
            watch_url=record.watch_url,
            subtitle=(
                SubtitleResponse.from_attachment(record.subtitle) if record.subtitle else None
            ),
        )


class CollectionResponse(BaseModel):
    """The full collection, newest first."""

    total: int = Field(..., examples=[3])
    with_subtitles: int = Field(..., examples=[1])
    videos: List[VideoResponse]


class NotificationResponse(BaseModel):
    """A transient status message."""

    id: int = Field(..., examples=[1])
    message: str = Field(..., examples=["Video added"])
    level: Literal["success", "error"] = Field(..., examples=["success"])
    expires_in: float = Field(..., description="Seconds until dismissal", examples=[4.2])

    @classmethod
    def from_notification(cls, notification: Notification, now: float) -> "NotificationResponse":
        return cls(**notification.to_dict(now))


class NotificationsResponse(BaseModel):
    """Currently active status messages."""

    notifications: List[NotificationResponse]


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    status: Literal["healthy", "unhealthy"] = Field(..., examples=["healthy"])
    details: Optional[Dict[str, Any]] = Field(default=None)


class HealthResponse(BaseModel):
    """Detailed health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., examples=["healthy"])
    timestamp: str = Field(..., examples=["2025-12-25T10:30:00Z"])
    version: str = Field(..., examples=["1.0.0"])
    uptime_seconds: float = Field(..., examples=[3600.5])
    components: Dict[str, ComponentHealth]


class LivenessResponse(BaseModel):
    """Simple liveness check response."""

    status: Literal["alive"] = Field(..., examples=["alive"])


class ErrorDetail(BaseModel):
    """Structured error response.

    All API errors follow this format with machine-readable error codes
    and optional suggestions for resolution.
    """

    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Video not found: dQw4w9WgXcQ"],
    )
    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["INVALID_VIDEO_ID", "VIDEO_NOT_FOUND", "QUOTA_EXCEEDED"],
    )
    details: Optional[str] = Field(None, description="Additional error context")
    timestamp: str = Field(..., examples=["2025-12-25T10:30:00Z"])
    request_id: Optional[str] = Field(
        None,
        description="Request ID for tracing",
        examples=["req_550e8400e29b"],
    )
    suggestion: Optional[str] = Field(
        None,
        description="Suggested action to resolve the error",
    )

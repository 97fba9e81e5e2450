"""Data models for the application."""

from vidshelf.models.video import SubtitleAttachment, VideoRecord

__all__ = [
    "SubtitleAttachment",
    "VideoRecord",
]

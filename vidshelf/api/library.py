"""Video library endpoints.

Lists the collection, adds videos from pasted URLs or IDs, deletes them, and
manages per-video subtitle files. Service exceptions propagate to the global
exception handler, which maps them to error responses.
"""

from typing import Any
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from vidshelf.api.schemas import (
    AddVideoRequest,
    CollectionResponse,
    ErrorDetail,
    NotificationResponse,
    NotificationsResponse,
    SubtitleUploadRequest,
    VideoResponse,
)
from vidshelf.services.library import LibraryService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["library"])

_INDEX_ERRORS: Any = {404: {"model": ErrorDetail, "description": "Index out of range"}}


# Dependency placeholder for the library service
async def get_library_service() -> LibraryService:
    """Get library service instance."""
    raise NotImplementedError("Library service dependency not configured")


def _content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII filenames."""
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/videos", response_model=CollectionResponse)
async def list_videos(
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> CollectionResponse:
    """List the collection, newest first."""
    videos = library.store.videos
    return CollectionResponse(
        total=len(videos),
        with_subtitles=library.store.subtitle_count,
        videos=[VideoResponse.from_record(v, i) for i, v in enumerate(videos)],
    )


@router.post(
    "/videos",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorDetail, "description": "Empty or unrecognized input"},
        403: {"model": ErrorDetail, "description": "Provider quota exhausted"},
        404: {"model": ErrorDetail, "description": "Video not found"},
        409: {"model": ErrorDetail, "description": "Duplicate video or add in progress"},
        422: {"model": ErrorDetail, "description": "Incomplete provider data"},
        500: {"model": ErrorDetail, "description": "Provider or storage error"},
    },
)
async def add_video(
    request: AddVideoRequest,
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> VideoResponse:
    """
    Add a video from a pasted URL or ID.

    The video's metadata is fetched from YouTube and the record is placed at
    the front of the collection.
    """
    record = await library.add_video(request.input)
    return VideoResponse.from_record(record, 0)


@router.delete("/videos/{index}", response_model=VideoResponse, responses=_INDEX_ERRORS)
async def delete_video(
    index: int,
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> VideoResponse:
    """Remove the video at index. Returns the removed record."""
    record = library.delete_video(index)
    return VideoResponse.from_record(record, index)


@router.put(
    "/videos/{index}/subtitle",
    response_model=VideoResponse,
    responses={
        400: {"model": ErrorDetail, "description": "Unsupported subtitle file type"},
        **_INDEX_ERRORS,
    },
)
async def upload_subtitle(
    index: int,
    upload: SubtitleUploadRequest,
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> VideoResponse:
    """Attach a subtitle file to the video at index, replacing any existing one."""
    record = library.attach_subtitle(index, upload.name, upload.content)
    return VideoResponse.from_record(record, index)


@router.get(
    "/videos/{index}/subtitle",
    response_class=Response,
    responses={
        200: {"content": {"text/plain": {}}, "description": "Subtitle file"},
        404: {"model": ErrorDetail, "description": "Index out of range or no subtitle"},
    },
)
async def download_subtitle(
    index: int,
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> Response:
    """Download the subtitle attached to the video at index, under its original name."""
    subtitle = library.get_subtitle(index)
    return Response(
        content=subtitle.content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": _content_disposition(subtitle.name)},
    )


@router.delete("/videos/{index}/subtitle", response_model=VideoResponse, responses=_INDEX_ERRORS)
async def remove_subtitle(
    index: int,
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> VideoResponse:
    """Remove the subtitle from the video at index."""
    record = library.detach_subtitle(index)
    return VideoResponse.from_record(record, index)


@router.get("/notifications", response_model=NotificationsResponse)
async def list_notifications(
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> NotificationsResponse:
    """Currently active status messages; expired ones are dropped."""
    queue = library.notifications
    now = queue.now()
    return NotificationsResponse(
        notifications=[NotificationResponse.from_notification(n, now) for n in queue.active()]
    )

"""Health check endpoints.

Reports whether the provider key is configured and the collection slot is
usable.
"""

import time
from datetime import datetime, timezone
from typing import Literal

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from vidshelf import __version__
from vidshelf.api.schemas import ComponentHealth, HealthResponse, LivenessResponse
from vidshelf.services.library import LibraryService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])

# Track application start time for uptime calculation
_start_time: float = time.time()


def reset_start_time() -> None:
    """Reset the start time (for testing)."""
    global _start_time
    _start_time = time.time()


# Dependency placeholder for the library service
async def get_library_service() -> LibraryService:
    """Get library service instance."""
    raise NotImplementedError("Library service dependency not configured")


def _check_provider(library: LibraryService) -> ComponentHealth:
    """Check the metadata provider has its API key."""
    if library.provider.is_configured:
        return ComponentHealth(status="healthy")
    return ComponentHealth(
        status="unhealthy",
        details={"error": "YouTube API key not configured"},
    )


def _check_collection(library: LibraryService) -> ComponentHealth:
    """Check the collection slot can be read."""
    store = library.store
    try:
        store.slots.get(store.slot_key)
    except Exception as e:
        return ComponentHealth(status="unhealthy", details={"error": str(e)})
    return ComponentHealth(
        status="healthy",
        details={"videos": len(store), "with_subtitles": store.subtitle_count},
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All components healthy"},
        503: {"description": "One or more components unhealthy"},
    },
)
async def health_check(
    library: LibraryService = Depends(get_library_service),  # noqa: B008
) -> JSONResponse:
    """
    Detailed health check endpoint.

    Returns HTTP 200 if all components are healthy,
    HTTP 503 if any component is unhealthy.
    """
    components = {
        "youtube_provider": _check_provider(library),
        "collection": _check_collection(library),
    }

    all_healthy = all(c.status == "healthy" for c in components.values())
    overall_status: Literal["healthy", "unhealthy"] = "healthy" if all_healthy else "unhealthy"

    response = HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
        components=components,
    )

    status_code = status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info(
        "health_check_completed",
        status=overall_status,
        components={k: v.status for k, v in components.items()},
    )

    return JSONResponse(content=response.model_dump(), status_code=status_code)


@router.get("/liveness", response_model=LivenessResponse)
async def liveness_check() -> LivenessResponse:
    """Liveness check endpoint. Returns HTTP 200 if the process is alive."""
    return LivenessResponse(status="alive")

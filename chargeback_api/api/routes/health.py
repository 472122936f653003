"""Health check routes."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    timestamp: str


def health_payload(service: str, status: str = "ok") -> HealthResponse:
    """Build a health response stamped with the current time (RFC 3339)."""
    return HealthResponse(
        status=status,
        service=service,
        timestamp=datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is running.",
)
async def health_check(request: Request) -> HealthResponse:
    """Return service health status."""
    return health_payload(request.app.state.container.settings.app.name)

"""Health check endpoint."""

from fastapi import APIRouter

from api.schemas import HealthResponse
from config import settings

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check that the API process is up.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(service=settings.app_name.lower())

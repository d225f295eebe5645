"""Health check endpoint."""

from fastapi import APIRouter, Request

from ..config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, str | list[str]]:
    """Return service health status and the registered extension paths."""
    pipeline = request.app.state.pipeline
    return {
        "status": "healthy",
        "service": settings.service_name,
        "environment": settings.environment,
        "paths": pipeline.policy.paths,
    }

"""
Health check endpoint

GET /health - server status
"""

from fastapi import APIRouter

from tillbook import __version__
from tillbook.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Report that the server is up."""
    return HealthResponse(status="ok", version=__version__)

"""System endpoints: health check."""

from fastapi import APIRouter

from nestegg import __version__
from nestegg.web.schemas import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health():
    """API health check."""
    return HealthResponse(status="ok", version=__version__)

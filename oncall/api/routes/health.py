"""Health check endpoints."""

import logging
from fastapi import APIRouter, status
from pydantic import BaseModel

from ...config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str
    environment: str
    services: dict[str, str]


def _configured(*values) -> str:
    return "configured" if all(values) else "missing"


@router.get("", response_model=HealthStatus, status_code=status.HTTP_200_OK)
async def health_check() -> HealthStatus:
    """Report liveness plus which integrations have their configuration.

    Missing configuration only disables the routes that need it, so the
    overall status stays "ok".
    """
    services = {
        "openai": _configured(settings.OPENAI_API_KEY),
        "session": _configured(settings.SESSION_SECRET),
        "linear_oauth": _configured(
            settings.LINEAR_OAUTH_CLIENT_ID,
            settings.LINEAR_OAUTH_CLIENT_SECRET,
            settings.PUBLIC_ORIGIN,
        ),
        "elevenlabs": _configured(settings.ELEVENLABS_API_KEY, settings.ELEVENLABS_AGENT_ID),
    }

    return HealthStatus(
        status="ok",
        environment=settings.ENVIRONMENT,
        services=services
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict:
    return {"ready": True}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict:
    return {"alive": True}

"""Speech transport endpoints."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ...exceptions import ConfigurationError
from ...services.elevenlabs import ElevenLabsError, get_signed_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["voice"])


@router.get(
    "/signed-url",
    summary="Get a signed conversation URL",
    description=(
        "Returns a short-lived signed URL the browser uses to open the "
        "ElevenLabs WebSocket. The API key stays on the server."
    )
)
async def signed_url():
    try:
        url = await get_signed_url()
    except (ConfigurationError, ElevenLabsError) as e:
        logger.error(f"Failed to get signed URL: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Failed to get signed URL"}
        )

    return {"signedUrl": url}

"""Intent detection and mockup generation endpoints."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ...models.intent import IntentRequest, IntentResult
from ...models.mockup import MockupRequest, MockupResult
from ...services.intent_detector import detect_intent
from ...services.mockup_generator import generate_mockup
from ...utils.metrics import Timer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])


def _error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message}
    )


@router.post(
    "/intent",
    response_model=IntentResult,
    summary="Detect a UI request",
    description="Classifies transcript text and returns structured intent data with a confidence score."
)
async def intent(body: IntentRequest):
    try:
        with Timer("api_intent"):
            return await detect_intent(body.transcript)
    except Exception as e:
        logger.error(f"Failed to detect intent: {e}", exc_info=True)
        return _error(str(e) or "Failed to detect intent")


@router.post(
    "/mockup",
    response_model=MockupResult,
    summary="Generate mockup variants",
    description="Generates 1-2 HTML/CSS variants that can be rendered in a sandboxed iframe."
)
async def mockup(body: MockupRequest):
    try:
        with Timer("api_mockup"):
            return await generate_mockup(body)
    except Exception as e:
        logger.error(f"Failed to generate mockup: {e}", exc_info=True)
        return _error(str(e) or "Failed to generate mockup")

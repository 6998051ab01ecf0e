"""ElevenLabs signed URLs for browser WebSocket sessions.

The browser connects to the Conversational AI agent directly with a
short-lived signed URL, so the API key never leaves the server.
"""

import logging
from typing import Optional

import httpx

from ..config import settings
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ELEVENLABS_API_BASE = "https://api.elevenlabs.io"


class ElevenLabsError(Exception):
    """The signed URL request failed."""


async def get_signed_url(
    api_key: Optional[str] = None,
    agent_id: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> str:
    """Fetch a signed conversation URL for the configured agent.

    Raises:
        ConfigurationError: If the API key or agent id is missing
        ElevenLabsError: If the API call fails
    """
    api_key = api_key or settings.ELEVENLABS_API_KEY
    agent_id = agent_id or settings.ELEVENLABS_AGENT_ID

    if not api_key:
        raise ConfigurationError("ELEVENLABS_API_KEY environment variable is required")
    if not agent_id:
        raise ConfigurationError("ELEVENLABS_AGENT_ID environment variable is required")

    url = f"{ELEVENLABS_API_BASE}/v1/convai/conversation/get-signed-url"

    try:
        async with httpx.AsyncClient(timeout=30, transport=transport) as client:
            response = await client.get(
                url,
                params={"agent_id": agent_id},
                headers={"xi-api-key": api_key},
            )
    except httpx.HTTPError as e:
        logger.error(f"ElevenLabs request failed: {e}")
        raise ElevenLabsError(f"ElevenLabs request failed: {e}") from e

    if not response.is_success:
        logger.error(f"ElevenLabs API error: {response.status_code} - {response.text}")
        raise ElevenLabsError(f"ElevenLabs API error: {response.status_code} - {response.text}")

    try:
        payload = response.json()
    except ValueError as e:
        raise ElevenLabsError(f"ElevenLabs returned an invalid response: {response.text}") from e

    signed_url = payload.get("signed_url") if isinstance(payload, dict) else None
    if not signed_url:
        raise ElevenLabsError("ElevenLabs response did not contain a signed_url")

    logger.info("Received ElevenLabs signed URL")
    return signed_url

"""Service layer for external dependencies."""

from .llm_service import get_llm
from .intent_detector import detect_intent
from .mockup_generator import generate_mockup
from .elevenlabs import ElevenLabsError, get_signed_url
from .linear_client import LinearAPIError, LinearClient

__all__ = [
    "get_llm",
    "detect_intent",
    "generate_mockup",
    "ElevenLabsError",
    "get_signed_url",
    "LinearAPIError",
    "LinearClient",
]

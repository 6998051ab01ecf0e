"""Intent detection models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import CamelModel, utc_now


class IntentRequest(BaseModel):
    """Body of POST /intent."""

    transcript: str = Field(..., min_length=1, description="Transcript text to analyze")

    model_config = {
        "json_schema_extra": {
            "examples": [{"transcript": "We need a better login page"}]
        }
    }


class IntentResult(CamelModel):
    """Structured output for intent classification.

    Used with LangChain's with_structured_output() for a guaranteed schema.
    """

    is_ui_request: bool = Field(..., description="Whether this is a UI/design-related request")
    confidence: float = Field(..., ge=0, le=1, description="Confidence score from 0 to 1")
    component: Optional[str] = Field(
        default=None,
        description="Type of UI component mentioned (e.g., button, form, modal, card)"
    )
    intent: Optional[str] = Field(
        default=None,
        description='The user\'s intent (e.g., "create a signup form", "add a dashboard widget")'
    )
    context: Optional[str] = Field(default=None, description="Additional context about the request")
    reasoning_short: Optional[str] = Field(default=None, description="Brief reasoning for the classification")


class DetectedIntent(IntentResult):
    """A classified utterance surfaced to the UI. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_text: str
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_result(cls, result: IntentResult, intent_id: str, source_text: str) -> "DetectedIntent":
        return cls(
            **result.model_dump(),
            id=intent_id,
            source_text=source_text,
        )

"""Transcript event models."""

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from .base import CamelModel, utc_now


class Speaker(str, Enum):
    """Who produced a transcript fragment."""

    USER = "user"
    AGENT = "agent"


class TranscriptEvent(CamelModel):
    """A fragment pushed by the speech transport.

    Arrival order is authoritative; ``timestamp`` is informational only.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    speaker: Speaker
    text: str
    is_final: bool = True
    timestamp: datetime = Field(default_factory=utc_now)

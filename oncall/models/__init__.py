"""Pydantic models for Oncall."""

from .base import CamelModel, utc_now
from .transcript import Speaker, TranscriptEvent
from .intent import IntentRequest, IntentResult, DetectedIntent
from .mockup import BrandColors, MockupRequest, MockupResult, MockupVariant
from .ticket import Ticket, TicketStatus
from .linear import IssueReference, LinearIssueRequest

__all__ = [
    "CamelModel",
    "utc_now",
    "Speaker",
    "TranscriptEvent",
    "IntentRequest",
    "IntentResult",
    "DetectedIntent",
    "BrandColors",
    "MockupRequest",
    "MockupResult",
    "MockupVariant",
    "Ticket",
    "TicketStatus",
    "IssueReference",
    "LinearIssueRequest",
]

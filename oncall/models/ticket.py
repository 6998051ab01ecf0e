"""Ticket models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelModel, utc_now
from .intent import DetectedIntent
from .mockup import MockupVariant


class TicketStatus(str, Enum):
    """Ticket lifecycle states.

    pending -> generating -> ready -> exporting -> exported, plus
    generating -> pending on failure and exporting -> ready on export failure.
    """

    PENDING = "pending"
    GENERATING = "generating"
    READY = "ready"
    EXPORTING = "exporting"
    EXPORTED = "exported"


class Ticket(CamelModel):
    """A detected UI request tracked through mockups to export."""

    id: str
    intent: DetectedIntent
    variants: list[MockupVariant] = Field(default_factory=list)
    selected_variant_index: Optional[int] = None
    status: TicketStatus = TicketStatus.GENERATING
    created_at: datetime = Field(default_factory=utc_now)
    exported_location: Optional[str] = None

    @property
    def selected_variant(self) -> Optional[MockupVariant]:
        if self.selected_variant_index is None:
            return None
        return self.variants[self.selected_variant_index]

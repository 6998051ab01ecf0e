"""One conversation's pipeline: gate, tickets and export wired together."""

import logging
from typing import Callable, Optional

from pydantic import BaseModel

from ..config import Settings
from ..exceptions import ConfigurationError
from ..models.linear import IssueReference
from ..models.ticket import Ticket
from ..models.transcript import Speaker, TranscriptEvent
from ..utils.metrics import MetricsCollector
from .export import ExportGateway
from .ids import IdSequence
from .intent_gate import Classifier, IntentGate
from .tickets import MockupGenerator, TicketStateMachine

logger = logging.getLogger(__name__)

EventListener = Callable[[str, dict], None]


class PipelineSession:
    """Single-session pipeline state.

    Listeners receive ``(kind, payload)`` where kind is ``transcript``,
    ``intent`` or ``ticket`` and payload is the camelCase JSON form of the
    model.
    """

    def __init__(
        self,
        classifier: Classifier,
        generator: MockupGenerator,
        export_gateway: Optional[ExportGateway] = None,
        debounce_seconds: float = 0.8,
        display_threshold: float = 0.6,
        ticket_threshold: float = 0.7,
        metrics_collector: Optional[MetricsCollector] = None
    ):
        self.export_gateway = export_gateway
        self.transcript: list[TranscriptEvent] = []
        self._event_ids = IdSequence("event")
        self._listeners: list[EventListener] = []

        self.tickets = TicketStateMachine(
            generator,
            ticket_ids=IdSequence("ticket"),
            metrics_collector=metrics_collector,
        )
        self.gate = IntentGate(
            classifier,
            self.tickets,
            intent_ids=IdSequence("intent"),
            debounce_seconds=debounce_seconds,
            display_threshold=display_threshold,
            ticket_threshold=ticket_threshold,
            metrics_collector=metrics_collector,
        )

        self.gate.subscribe(lambda intent: self._emit("intent", intent))
        self.tickets.subscribe(lambda ticket: self._emit("ticket", ticket))

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        classifier: Classifier,
        generator: MockupGenerator,
        export_gateway: Optional[ExportGateway] = None
    ) -> "PipelineSession":
        return cls(
            classifier,
            generator,
            export_gateway=export_gateway,
            debounce_seconds=settings.INTENT_DEBOUNCE_MS / 1000,
            display_threshold=settings.INTENT_DISPLAY_THRESHOLD,
            ticket_threshold=settings.INTENT_TICKET_THRESHOLD,
        )

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def _emit(self, kind: str, model: BaseModel) -> None:
        payload = model.model_dump(mode="json", by_alias=True)
        for listener in list(self._listeners):
            listener(kind, payload)

    def receive_fragment(self, speaker: Speaker, text: str, is_final: bool = True) -> TranscriptEvent:
        """Record a transcript fragment and pass it to the intent gate."""
        event = TranscriptEvent(
            id=self._event_ids.next_id(),
            speaker=speaker,
            text=text,
            is_final=is_final,
        )
        self.transcript.append(event)
        self._emit("transcript", event)
        self.gate.handle_event(event)
        return event

    def select_variant(self, ticket_id: str, index: int) -> Ticket:
        return self.tickets.select_variant(ticket_id, index)

    def retry(self, ticket_id: str) -> Ticket:
        return self.tickets.retry_generation(ticket_id)

    def remove(self, ticket_id: str) -> bool:
        return self.tickets.remove(ticket_id)

    async def export(
        self,
        ticket_id: str,
        access_token: Optional[str],
        **options
    ) -> IssueReference:
        """Export a ready ticket; the ticket returns to ``ready`` on failure."""
        if self.export_gateway is None:
            raise ConfigurationError("Export is not configured for this session")

        ticket = self.tickets.begin_export(ticket_id)
        try:
            reference = await self.export_gateway.export(ticket, access_token, **options)
        except Exception:
            if ticket_id in self.tickets:
                self.tickets.abort_export(ticket_id)
            raise

        if ticket_id in self.tickets:
            self.tickets.mark_exported(ticket_id, reference.url)
        return reference

    async def wait_idle(self) -> None:
        """Wait for in-flight classification and the generation it triggers."""
        await self.gate.wait_idle()
        await self.tickets.wait_idle()

    def close(self) -> None:
        logger.info(
            f"Closing pipeline session - {len(self.transcript)} fragments, "
            f"{len(self.tickets)} tickets"
        )
        self.gate.close()
        self.tickets.close()
        self._listeners.clear()

"""Ticket lifecycle state machine."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence

from ..exceptions import InvalidTicketTransitionError, TicketNotFoundError
from ..models.intent import DetectedIntent
from ..models.mockup import MockupRequest, MockupResult, MockupVariant
from ..models.ticket import Ticket, TicketStatus
from ..utils.metrics import MetricsCollector, Timer, metrics
from .ids import IdSequence

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT = "component"

MockupGenerator = Callable[[MockupRequest], Awaitable[MockupResult]]
TicketListener = Callable[[Ticket], None]

ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.PENDING: frozenset({TicketStatus.GENERATING}),
    TicketStatus.GENERATING: frozenset({TicketStatus.READY, TicketStatus.PENDING}),
    TicketStatus.READY: frozenset({TicketStatus.EXPORTING}),
    TicketStatus.EXPORTING: frozenset({TicketStatus.EXPORTED, TicketStatus.READY}),
    TicketStatus.EXPORTED: frozenset(),
}


def build_mockup_request(intent: DetectedIntent) -> MockupRequest:
    """Generation parameters for a ticket opened from ``intent``."""
    return MockupRequest(
        component=intent.component or DEFAULT_COMPONENT,
        intent=intent.intent or intent.source_text,
        context=intent.context,
    )


class TicketStateMachine:
    """Owns every ticket of a session and all of their state changes.

    Callers only ever receive snapshots; the live tickets stay inside the
    machine. Listeners are called with a snapshot after each change.
    """

    def __init__(
        self,
        generator: MockupGenerator,
        ticket_ids: Optional[IdSequence] = None,
        metrics_collector: Optional[MetricsCollector] = None
    ):
        self.generator = generator
        self.ticket_ids = ticket_ids or IdSequence("ticket")
        self.metrics = metrics_collector or metrics

        self._tickets: dict[str, Ticket] = {}
        self._listeners: list[TicketListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    # Queries

    @property
    def tickets(self) -> list[Ticket]:
        """Snapshots of all tickets in creation order."""
        return [ticket.model_copy(deep=True) for ticket in self._tickets.values()]

    def get(self, ticket_id: str) -> Ticket:
        return self._require(ticket_id).model_copy(deep=True)

    def __contains__(self, ticket_id: object) -> bool:
        return ticket_id in self._tickets

    def __len__(self) -> int:
        return len(self._tickets)

    def subscribe(self, listener: TicketListener) -> None:
        self._listeners.append(listener)

    # Lifecycle

    def create_from_intent(self, intent: DetectedIntent) -> Ticket:
        """Open a ticket in ``generating`` and start mockup generation."""
        ticket = Ticket(
            id=self.ticket_ids.next_id(),
            intent=intent,
            status=TicketStatus.GENERATING,
        )
        self._tickets[ticket.id] = ticket
        self.metrics.increment_counter("tickets_created")
        logger.info(f"Created {ticket.id} for intent {intent.id} ({intent.component})")

        self._publish(ticket)
        self._schedule_generation(ticket)
        return ticket.model_copy(deep=True)

    def retry_generation(self, ticket_id: str) -> Ticket:
        """Run generation again for a ticket that fell back to ``pending``."""
        ticket = self._require(ticket_id)
        self._transition(ticket, TicketStatus.GENERATING)
        logger.info(f"Retrying mockup generation for {ticket_id}")

        self._publish(ticket)
        self._schedule_generation(ticket)
        return ticket.model_copy(deep=True)

    def select_variant(self, ticket_id: str, index: int) -> Ticket:
        """Select a variant; an out-of-range index leaves the ticket unchanged."""
        ticket = self._require(ticket_id)
        if 0 <= index < len(ticket.variants):
            ticket.selected_variant_index = index
            self._publish(ticket)
        else:
            logger.debug(f"Ignored variant index {index} for {ticket_id}")
        return ticket.model_copy(deep=True)

    def begin_export(self, ticket_id: str) -> Ticket:
        """Move a ``ready`` ticket to ``exporting``.

        A second export request for the same ticket fails here instead of
        creating a second issue.
        """
        ticket = self._require(ticket_id)
        self._transition(ticket, TicketStatus.EXPORTING)
        self._publish(ticket)
        return ticket.model_copy(deep=True)

    def mark_exported(self, ticket_id: str, location: str) -> Ticket:
        """Record a confirmed export. Valid from ``ready`` or ``exporting``."""
        ticket = self._require(ticket_id)
        if ticket.status is TicketStatus.READY:
            self._transition(ticket, TicketStatus.EXPORTING)
        self._transition(ticket, TicketStatus.EXPORTED)
        ticket.exported_location = location
        self.metrics.increment_counter("tickets_exported")
        logger.info(f"{ticket_id} exported to {location}")

        self._publish(ticket)
        return ticket.model_copy(deep=True)

    def abort_export(self, ticket_id: str) -> Ticket:
        """Return an ``exporting`` ticket to ``ready`` after a failed export."""
        ticket = self._require(ticket_id)
        self._transition(ticket, TicketStatus.READY)
        self._publish(ticket)
        return ticket.model_copy(deep=True)

    def remove(self, ticket_id: str) -> bool:
        """Drop a ticket at the user's request.

        Generation results that arrive later for it are discarded.
        """
        removed = self._tickets.pop(ticket_id, None)
        if removed is not None:
            logger.info(f"Removed {ticket_id}")
        return removed is not None

    async def wait_idle(self) -> None:
        """Wait for all scheduled generation tasks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Stop applying generation results. Running calls are not aborted."""
        self._closed = True
        self._listeners.clear()

    # Internals

    def _require(self, ticket_id: str) -> Ticket:
        ticket = self._tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def _transition(self, ticket: Ticket, target: TicketStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[ticket.status]:
            raise InvalidTicketTransitionError(ticket.id, ticket.status.value, target.value)
        logger.debug(f"{ticket.id}: {ticket.status.value} -> {target.value}")
        ticket.status = target

    def _publish(self, ticket: Ticket) -> None:
        if not self._listeners:
            return
        snapshot = ticket.model_copy(deep=True)
        for listener in list(self._listeners):
            listener(snapshot)

    def _schedule_generation(self, ticket: Ticket) -> None:
        request = build_mockup_request(ticket.intent)
        task = asyncio.create_task(self._generate(ticket.id, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _generate(self, ticket_id: str, request: MockupRequest) -> None:
        try:
            with Timer("mockup_generation", self.metrics):
                result = await self.generator(request)
        except Exception as e:
            logger.error(f"Failed to generate mockup for {ticket_id}: {e}")
            self.metrics.increment_counter("mockup_failures")
            self._apply_failure(ticket_id)
            return

        self._apply_variants(ticket_id, result.variants)

    def _live_generating(self, ticket_id: str) -> Optional[Ticket]:
        if self._closed:
            return None
        ticket = self._tickets.get(ticket_id)
        if ticket is None:
            logger.info(f"Dropping generation result for removed ticket {ticket_id}")
            return None
        if ticket.status is not TicketStatus.GENERATING:
            logger.warning(f"Dropping generation result for {ticket_id} in state {ticket.status.value}")
            return None
        return ticket

    def _apply_variants(self, ticket_id: str, variants: Sequence[MockupVariant]) -> None:
        ticket = self._live_generating(ticket_id)
        if ticket is None:
            return
        if not variants:
            logger.warning(f"Generator returned no variants for {ticket_id}")
            self._apply_failure(ticket_id)
            return

        ticket.variants = list(variants)
        ticket.selected_variant_index = 0
        self._transition(ticket, TicketStatus.READY)
        logger.info(f"{ticket_id} ready with {len(variants)} variant(s)")
        self._publish(ticket)

    def _apply_failure(self, ticket_id: str) -> None:
        ticket = self._live_generating(ticket_id)
        if ticket is None:
            return
        ticket.variants = []
        ticket.selected_variant_index = None
        self._transition(ticket, TicketStatus.PENDING)
        self._publish(ticket)

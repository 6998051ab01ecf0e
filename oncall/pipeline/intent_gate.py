"""Intent gate - turns settled user speech into surfaced intents and tickets."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..models.intent import DetectedIntent, IntentResult
from ..models.transcript import Speaker, TranscriptEvent
from ..utils.metrics import MetricsCollector, Timer, metrics
from .debounce import DebounceTimer
from .ids import IdSequence
from .tickets import TicketStateMachine

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.8
DEFAULT_DISPLAY_THRESHOLD = 0.6
DEFAULT_TICKET_THRESHOLD = 0.7

Classifier = Callable[[str], Awaitable[IntentResult]]
IntentListener = Callable[[DetectedIntent], None]


class IntentGate:
    """Debounces final user fragments and classifies the last one of a burst.

    Confidence bands:
        c <= display_threshold: discarded
        display_threshold < c <= ticket_threshold: surfaced, no ticket
        c > ticket_threshold: surfaced and a ticket is created

    A classification call that is already running is never cancelled by a
    later fragment, so results may complete out of order. Each result is
    applied on its own; nothing assumes call order equals completion order.
    """

    def __init__(
        self,
        classifier: Classifier,
        ticket_machine: TicketStateMachine,
        intent_ids: Optional[IdSequence] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        display_threshold: float = DEFAULT_DISPLAY_THRESHOLD,
        ticket_threshold: float = DEFAULT_TICKET_THRESHOLD,
        metrics_collector: Optional[MetricsCollector] = None
    ):
        self.classifier = classifier
        self.ticket_machine = ticket_machine
        self.intent_ids = intent_ids or IdSequence("intent")
        self.display_threshold = display_threshold
        self.ticket_threshold = ticket_threshold
        self.metrics = metrics_collector or metrics

        self.intents: list[DetectedIntent] = []
        self._listeners: list[IntentListener] = []
        self._timer = DebounceTimer(debounce_seconds, self._on_quiet)
        self._inflight: set[asyncio.Task] = set()
        self._closed = False

    def subscribe(self, listener: IntentListener) -> None:
        self._listeners.append(listener)

    def handle_event(self, event: TranscriptEvent) -> None:
        """Feed a transcript event; only final user fragments count."""
        if event.speaker is Speaker.USER and event.is_final:
            self.submit(event.text)

    def submit(self, text: str) -> None:
        """Restart the debounce window with ``text`` as the candidate."""
        if self._closed:
            return
        text = text.strip()
        if not text:
            return
        self._timer.schedule(text)

    def _on_quiet(self, text: str) -> None:
        task = asyncio.create_task(self._classify(text))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _classify(self, text: str) -> Optional[DetectedIntent]:
        logger.info(f"Classifying transcript fragment ({len(text)} chars)")
        try:
            with Timer("intent_classification", self.metrics):
                result = await self.classifier(text)
        except Exception as e:
            # The next utterance retries the whole pipeline
            logger.error(f"Intent detection failed: {e}")
            self.metrics.increment_counter("intent_failures")
            return None

        if self._closed:
            logger.debug("Session closed; dropping intent result")
            return None

        return self.apply_result(text, result)

    def apply_result(self, text: str, result: IntentResult) -> Optional[DetectedIntent]:
        """Apply one classifier result for ``text``.

        Returns:
            The surfaced DetectedIntent, or None if it was discarded
        """
        self.metrics.increment_counter("intents_classified")

        if not result.is_ui_request or result.confidence <= self.display_threshold:
            logger.debug(
                f"Discarded intent - UI request: {result.is_ui_request}, "
                f"Confidence: {result.confidence:.2f}"
            )
            return None

        detected = DetectedIntent.from_result(result, self.intent_ids.next_id(), text)
        self.intents.append(detected)
        self.metrics.increment_counter("intents_surfaced")

        for listener in list(self._listeners):
            listener(detected)

        if result.confidence > self.ticket_threshold:
            self.ticket_machine.create_from_intent(detected)

        return detected

    @property
    def pending(self) -> bool:
        """True while a debounce window is open."""
        return self._timer.pending

    async def wait_idle(self) -> None:
        """Wait for classification calls that are already running."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending window and ignore results still in flight."""
        self._closed = True
        self._timer.cancel()
        self._listeners.clear()

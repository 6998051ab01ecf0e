"""Cancellable timer for debouncing bursts of events."""

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class DebounceTimer:
    """Runs ``callback`` once a burst of ``schedule`` calls goes quiet.

    Each ``schedule`` replaces the pending timer, so only the arguments of
    the last call in a burst reach the callback. Must be used from inside a
    running event loop.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, *args: Any) -> None:
        if self._handle is not None:
            logger.debug("Debounce timer restarted")
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        self.callback(*args)

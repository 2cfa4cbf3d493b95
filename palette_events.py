"""
Publish/subscribe channel between the workspace and its collaborators.

Three signals are carried:
    PALETTE_GENERATED  a generator produced a GeneratedPalette
    PALETTE_UPDATED    the workspace document changed (payload: the Workspace)
    PALETTE_SAVED      a palette was appended to persistent storage
"""

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

PALETTE_GENERATED = 'paletteGenerated'
PALETTE_UPDATED = 'paletteUpdated'
PALETTE_SAVED = 'paletteSaved'

SIGNALS = (PALETTE_GENERATED, PALETTE_UPDATED, PALETTE_SAVED)

Handler = Callable[[Any], None]


class EventBus:
    """Synchronous signal dispatch; handlers run in subscription order."""

    def __init__(self):
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, signal: str, handler: Handler) -> Callable[[], None]:
        """Register a handler and return a function that unregisters it."""
        if signal not in SIGNALS:
            raise ValueError(f"Unknown signal: {signal!r}")
        self._handlers[signal].append(handler)

        def unsubscribe():
            if handler in self._handlers[signal]:
                self._handlers[signal].remove(handler)

        return unsubscribe

    def publish(self, signal: str, payload: Any = None) -> None:
        if signal not in SIGNALS:
            raise ValueError(f"Unknown signal: {signal!r}")
        handlers = list(self._handlers[signal])
        logger.debug("Publishing %s to %d handler(s)", signal, len(handlers))
        for handler in handlers:
            handler(payload)

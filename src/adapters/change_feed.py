"""
In-process change notifications.

Repos publish a ChangeEvent after every committed write; subscribers (the
live admin post list, the query cache) react synchronously.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from src.domain.events import ChangeEvent

logger = logging.getLogger(__name__)

Handler = Callable[[ChangeEvent], None]


class ChangeFeed:
    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        with self._lock:
            self._handlers.setdefault(topic, []).append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(topic, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            handlers = list(self._handlers.get(event.topic, []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # Subscriber errors never reach the writer.
                logger.exception("Change handler failed for %s", event.topic)

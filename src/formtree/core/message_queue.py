"""
Deferred message delivery for a field tree.

Fields post zero-argument work here instead of calling their parent
synchronously when the notification must not re-enter the change that
produced it. Receivers are held weakly: a message whose receiver has been
collected is dropped on delivery.
"""

import logging
import weakref
from collections import deque
from typing import Any, Callable, Deque, List, Tuple

logger = logging.getLogger(__name__)


def _weak_callable(handler: Callable) -> Callable[[], Any]:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return weakref.WeakMethod(handler)
    return lambda: handler


class MessageQueue:
    """
    FIFO queue of deferred calls.

    Messages posted while the queue drains wait for the next ``drain()``.
    Listeners are told about every post so an event loop can schedule a
    drain (see ``formtree.qt.QtMessagePump``).

    Example:
        queue = MessageQueue()
        queue.post(field.notify_valid, "validationStateChange")
        queue.drain()  # -> 1
    """

    def __init__(self):
        self._pending: Deque[Tuple[Callable[[], Any], tuple]] = deque()
        self._listeners: List[Callable[[], None]] = []

    def __len__(self) -> int:
        return len(self._pending)

    def post(self, handler: Callable, *args) -> None:
        self._pending.append((_weak_callable(handler), args))
        for listener in list(self._listeners):
            listener()

    def drain(self) -> int:
        """
        Deliver every message that was pending when the call started.

        Returns:
            Number of messages delivered to a live receiver
        """
        batch = self._pending
        self._pending = deque()
        delivered = 0
        try:
            while batch:
                ref, args = batch.popleft()
                handler = ref()
                if handler is None:
                    logger.debug("Dropping message for a collected receiver")
                    continue
                handler(*args)
                delivered += 1
        finally:
            if batch:
                # Undelivered messages keep their place ahead of newer posts
                batch.extend(self._pending)
                self._pending = batch
        return delivered

    def clear(self) -> None:
        self._pending.clear()

    def add_listener(self, listener: Callable[[], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

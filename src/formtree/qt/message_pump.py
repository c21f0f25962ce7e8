"""Drains a form's MessageQueue on the Qt event loop."""

import logging

from PyQt6.QtCore import QTimer

from formtree.core.message_queue import MessageQueue

logger = logging.getLogger(__name__)


class QtMessagePump:
    """
    Schedules a zero-delay drain whenever a message is posted.

    Several posts before the event loop runs share one drain.

    Usage:
        form = FormRoot(Person, value)
        pump = QtMessagePump(form.message_queue)
        ...
        pump.detach()
    """

    def __init__(self, queue: MessageQueue):
        self._queue = queue
        self._scheduled = False
        queue.add_listener(self.schedule)
        if len(queue):
            self.schedule()

    @property
    def is_scheduled(self) -> bool:
        return self._scheduled

    def schedule(self):
        """Schedule a drain on the next event loop turn."""
        if self._scheduled:
            return
        self._scheduled = True
        QTimer.singleShot(0, self._drain)

    def _drain(self):
        self._scheduled = False
        delivered = self._queue.drain()
        logger.debug(f"Delivered {delivered} deferred form message(s)")

    def detach(self):
        """Stop scheduling drains for the queue."""
        self._queue.remove_listener(self.schedule)

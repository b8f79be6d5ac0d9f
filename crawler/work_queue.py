"""Unbounded multi-producer, single-consumer queue of crawl work items."""
import threading
from collections import deque
from typing import Deque


class QueueClosed(Exception):
    """Raised when putting through a sender that has been closed."""


class QueueSender:
    """
    Sending half of a WorkQueue.

    The queue reports end-of-stream only once every sender is closed, so a
    sender should be closed (or used as a context manager) when its owner is
    done producing.
    """

    def __init__(self, queue: "WorkQueue"):
        self._queue = queue
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item) -> None:
        """Enqueue an item. Never blocks."""
        if self._closed:
            raise QueueClosed("Sender is closed")
        self._queue._put(item)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue._release_sender()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class WorkQueue:
    """
    Ordered work queue.

    Items come out in the order they were put in. ``get`` blocks until an
    item arrives, and returns None once the queue is empty and no sender is
    left open.
    """

    def __init__(self):
        self._items: Deque = deque()
        self._open_senders = 0
        self._cond = threading.Condition()

    def sender(self) -> QueueSender:
        with self._cond:
            self._open_senders += 1
        return QueueSender(self)

    def get(self):
        """Dequeue the next item, or return None at end-of-stream."""
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._open_senders == 0)
            if self._items:
                return self._items.popleft()
            return None

    @property
    def open_senders(self) -> int:
        with self._cond:
            return self._open_senders

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def _put(self, item) -> None:
        with self._cond:
            self._items.append(item)
            self._cond.notify()

    def _release_sender(self) -> None:
        with self._cond:
            self._open_senders -= 1
            self._cond.notify_all()

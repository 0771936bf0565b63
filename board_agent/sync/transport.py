"""In-process transport between the canonical side and the replica."""
from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from .messages import ReplicaPush, SnapshotMessage

PushHandler = Callable[[ReplicaPush], Any]
SnapshotHandler = Callable[[SnapshotMessage], Any]


class LoopbackTransport:
    """Ordered single-threaded delivery in both directions.

    Messages are delivered in the order they were sent, regardless of
    direction. A message sent while another one is being delivered is
    queued and delivered after it, never recursively.
    """

    def __init__(self, auto_pump: bool = True) -> None:
        self.auto_pump = auto_pump
        self._queue: Deque[Tuple[str, Any]] = deque()
        self._on_push: Optional[PushHandler] = None
        self._on_snapshot: Optional[SnapshotHandler] = None
        self._pumping = False
        self.delivered = 0

    def connect(self, on_push: PushHandler, on_snapshot: SnapshotHandler) -> None:
        self._on_push = on_push
        self._on_snapshot = on_snapshot

    @property
    def pending(self) -> int:
        return len(self._queue)

    def send_push(self, push: ReplicaPush) -> None:
        self._queue.append(("push", push))
        if self.auto_pump:
            self.pump()

    def send_snapshot(self, message: SnapshotMessage) -> None:
        self._queue.append(("snapshot", message))
        if self.auto_pump:
            self.pump()

    def pump(self) -> int:
        """Deliver queued messages until the queue is empty."""
        if self._pumping:
            return 0
        if self._on_push is None or self._on_snapshot is None:
            raise RuntimeError("Transport is not connected")

        self._pumping = True
        delivered = 0
        try:
            while self._queue:
                kind, message = self._queue.popleft()
                if kind == "push":
                    self._on_push(message)
                else:
                    self._on_snapshot(message)
                delivered += 1
        finally:
            self._pumping = False
        self.delivered += delivered
        return delivered


__all__ = ["LoopbackTransport"]

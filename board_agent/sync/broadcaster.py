"""Publishes full board snapshots from the canonical store."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..models.issue import DEFAULT_PROJECT_NAME, BoardState
from ..store.issue_store import IssueStore
from .messages import Origin, ReplicaPush, SnapshotMessage

logger = logging.getLogger(__name__)

Subscriber = Callable[[SnapshotMessage], None]


class StateBroadcaster:
    """Turns the store into versioned snapshots and fans them out.

    Snapshots are complete copies of the board; there are no deltas.
    Versions increase by one per publish and are never reused.
    """

    def __init__(self, store: IssueStore, project_name: str = DEFAULT_PROJECT_NAME) -> None:
        self._store = store
        self.project_name = project_name
        self._version = 0
        self._subscribers: List[Subscriber] = []

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> BoardState:
        return BoardState(issues=self._store.list(), project_name=self.project_name)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, origin: Origin = "agent", ack: Optional[int] = None) -> SnapshotMessage:
        self._version += 1
        message = SnapshotMessage(
            version=self._version,
            origin=origin,
            ack=ack,
            state=self.snapshot(),
        )
        logger.debug(
            "Publishing snapshot v%d (origin=%s, ack=%s, issues=%d)",
            message.version,
            origin,
            ack,
            len(message.state.issues),
        )
        for callback in list(self._subscribers):
            callback(message)
        return message

    def accept(self, push: ReplicaPush) -> SnapshotMessage:
        """Adopt a replica push as the new canonical state and echo it back."""
        self._store.replace(push.issues)
        logger.info("Accepted replica push #%d, count: %d", push.sequence, len(push.issues))
        return self.publish(origin="replica", ack=push.sequence)


__all__ = ["StateBroadcaster", "Subscriber"]

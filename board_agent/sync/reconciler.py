"""UI-side replica of the board and its reconciliation with the agent."""
from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, List, Literal, Optional, Sequence

from ..models.issue import (
    DEFAULT_PRIORITY,
    DEFAULT_PROJECT_NAME,
    DEFAULT_STATUS,
    Issue,
    generate_issue_id,
)
from ..utils.clock import Clock, next_after, system_now, utc_now
from ..utils.text import dedupe_labels
from .messages import ReplicaPush, SnapshotMessage
from .storage import ReplicaStorage

logger = logging.getLogger(__name__)

SyncState = Literal["idle", "applying-local", "applying-remote"]
Listener = Callable[[List[Issue]], None]
Sender = Callable[[ReplicaPush], None]

EDITABLE_FIELDS = ("title", "description", "status", "priority", "assignee", "labels")


class ReplicaReconciler:
    """Hold the UI replica and keep it convergent with the canonical store.

    Local edits are applied optimistically and pushed with an increasing
    sequence number. The canonical side answers every push with a snapshot
    tagged ``origin="replica"`` whose ``ack`` names that sequence; such an
    echo is consumed without pushing again. Every other snapshot overwrites
    the replica wholesale. Inbound snapshots never trigger a push.
    """

    def __init__(
        self,
        storage: Optional[ReplicaStorage] = None,
        send: Optional[Sender] = None,
        clock: Optional[Clock] = None,
        project_name: str = DEFAULT_PROJECT_NAME,
    ) -> None:
        self._issues: List[Issue] = []
        self.project_name = project_name
        self._storage = storage
        self._send = send
        self._clock = clock or system_now
        self._hydrated = False
        self._state: SyncState = "idle"
        self._sequence = 0
        self._in_flight: Deque[int] = deque()
        self._last_version = 0
        self._listeners: List[Listener] = []

        self.pushes_sent = 0
        self.echoes_consumed = 0
        self.remote_applied = 0
        self.stale_dropped = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def issues(self) -> List[Issue]:
        return [issue.model_copy(deep=True) for issue in self._issues]

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def in_flight(self) -> List[int]:
        return list(self._in_flight)

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    def find(self, issue_id: str) -> Optional[Issue]:
        index = self._index_of(issue_id)
        return None if index is None else self._issues[index].model_copy(deep=True)

    def bind(self, send: Sender) -> None:
        self._send = send

    def on_change(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------
    def hydrate(self) -> List[Issue]:
        """Load the persisted replica once; later calls are no-ops."""
        if not self._hydrated:
            stored = self._storage.load() if self._storage is not None else []
            if stored:
                self._issues = stored
            self._hydrated = True
            logger.debug("Hydrated replica with %d issues", len(self._issues))
        return self.issues

    def start(self) -> None:
        """Hydrate and publish a non-empty stored replica to the agent."""
        self.hydrate()
        if self._issues:
            self._push()

    # ------------------------------------------------------------------
    # Local edits
    # ------------------------------------------------------------------
    def create_issue(
        self,
        title: str,
        description: str = "",
        status: str = DEFAULT_STATUS,
        priority: str = DEFAULT_PRIORITY,
        assignee: Optional[str] = None,
        labels: Optional[Sequence[str]] = None,
    ) -> Issue:
        title = (title or "").strip()
        if not title:
            raise ValueError("Issue title is required")

        now = utc_now(self._clock)
        issue = Issue(
            id=self._new_id(),
            title=title,
            description=description or "",
            status=status or DEFAULT_STATUS,
            priority=priority or DEFAULT_PRIORITY,
            assignee=assignee or None,
            labels=dedupe_labels(labels or []),
            created_at=now,
            updated_at=now,
        )
        self._issues.append(issue)
        self._commit_local()
        return issue.model_copy(deep=True)

    def update_issue(self, issue_id: str, **fields: Any) -> bool:
        unknown = set(fields).difference(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit fields: {', '.join(sorted(unknown))}")

        index = self._index_of(issue_id)
        if index is None:
            return False

        changes = {key: value for key, value in fields.items() if value is not None}
        if "labels" in changes:
            changes["labels"] = dedupe_labels(changes["labels"])
        if "assignee" in changes and not changes["assignee"]:
            changes["assignee"] = None

        current = self._issues[index]
        data = current.model_dump()
        data.update(changes)
        data["id"] = current.id
        data["created_at"] = current.created_at
        data["updated_at"] = next_after(current.updated_at, self._clock)
        self._issues[index] = Issue.model_validate(data)
        self._commit_local()
        return True

    def move_issue(self, issue_id: str, status: str) -> bool:
        return self.update_issue(issue_id, status=status)

    def delete_issue(self, issue_id: str) -> bool:
        index = self._index_of(issue_id)
        if index is None:
            return False
        del self._issues[index]
        self._commit_local()
        return True

    def replace_all(self, issues: Sequence[Issue]) -> None:
        self._issues = [issue.model_copy(deep=True) for issue in issues]
        self._commit_local()

    # ------------------------------------------------------------------
    # Inbound snapshots
    # ------------------------------------------------------------------
    def receive(self, message: SnapshotMessage) -> bool:
        """Merge an inbound snapshot; return ``True`` if the replica changed."""
        if message.version <= self._last_version:
            self.stale_dropped += 1
            logger.debug(
                "Dropping stale snapshot v%d (last seen v%d)",
                message.version,
                self._last_version,
            )
            return False
        self._last_version = message.version

        incoming = [issue.model_copy(deep=True) for issue in message.state.issues]

        if message.origin == "replica" and message.ack in self._in_flight:
            self._drain_through(message.ack)
            self.echoes_consumed += 1
            logger.debug("Consumed echo of push #%d", message.ack)
            if self._in_flight or _same_issues(incoming, self._issues):
                return False
            # The canonical side diverged from the replica before our push landed.
            return self._apply_remote(incoming, message.state.project_name)

        return self._apply_remote(incoming, message.state.project_name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _apply_remote(self, incoming: List[Issue], project_name: str) -> bool:
        self._state = "applying-remote"
        try:
            self._issues = incoming
            self.project_name = project_name
            self.remote_applied += 1
            logger.debug("Applied remote snapshot, count: %d", len(incoming))
            self._persist()
            self._notify()
        finally:
            self._state = "idle"
        return True

    def _commit_local(self) -> None:
        self._state = "applying-local"
        try:
            self._persist()
            self._notify()
            self._push()
        finally:
            self._state = "idle"

    def _push(self) -> None:
        if self._send is None:
            return
        self._sequence += 1
        self._in_flight.append(self._sequence)
        self.pushes_sent += 1
        self._send(ReplicaPush(sequence=self._sequence, issues=self.issues))

    def _drain_through(self, sequence: int) -> None:
        while self._in_flight:
            if self._in_flight.popleft() == sequence:
                break

    def _persist(self) -> None:
        if self._storage is None or not self._hydrated:
            return
        self._storage.save(self._issues)

    def _notify(self) -> None:
        snapshot = self.issues
        for listener in list(self._listeners):
            listener(snapshot)

    def _new_id(self) -> str:
        while True:
            candidate = generate_issue_id()
            if self._index_of(candidate) is None:
                return candidate

    def _index_of(self, issue_id: str) -> Optional[int]:
        for index, issue in enumerate(self._issues):
            if issue.id == issue_id:
                return index
        return None


def _same_issues(left: List[Issue], right: List[Issue]) -> bool:
    return [issue.to_wire() for issue in left] == [issue.to_wire() for issue in right]


__all__ = ["EDITABLE_FIELDS", "ReplicaReconciler", "SyncState"]

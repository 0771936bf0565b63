"""One board session: the canonical store, its tools and the UI replica."""
from __future__ import annotations

from typing import Optional

from ..models.issue import DEFAULT_PROJECT_NAME, BoardState
from ..store.issue_store import IssueStore
from ..sync.broadcaster import StateBroadcaster
from ..sync.reconciler import ReplicaReconciler
from ..sync.storage import ReplicaStorage
from ..sync.transport import LoopbackTransport
from ..tools.board import ToolContract
from ..utils.clock import Clock


class BoardSession:
    """Own and wire every stateful component for a single session.

    Nothing here is shared between sessions; two ``BoardSession`` objects
    have independent stores and replicas.
    """

    def __init__(
        self,
        project_name: str = DEFAULT_PROJECT_NAME,
        storage: Optional[ReplicaStorage] = None,
        clock: Optional[Clock] = None,
        auto_pump: bool = True,
    ) -> None:
        self.store = IssueStore(clock=clock)
        self.broadcaster = StateBroadcaster(self.store, project_name)
        self.contract = ToolContract(self.store, self.broadcaster)
        self.reconciler = ReplicaReconciler(
            storage=storage,
            clock=clock,
            project_name=project_name,
        )
        self.transport = LoopbackTransport(auto_pump=auto_pump)

        self.transport.connect(
            on_push=self.broadcaster.accept,
            on_snapshot=self.reconciler.receive,
        )
        self.broadcaster.subscribe(self.transport.send_snapshot)
        self.reconciler.bind(self.transport.send_push)

    def start(self) -> "BoardSession":
        """Hydrate the replica and hand any stored issues to the agent side."""
        self.reconciler.start()
        return self

    def snapshot(self) -> BoardState:
        return self.broadcaster.snapshot()


__all__ = ["BoardSession"]

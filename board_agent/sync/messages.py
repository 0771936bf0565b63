"""Messages exchanged between the canonical store and the UI replica."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.issue import BoardState, Issue

Origin = Literal["agent", "replica"]


class SnapshotMessage(BaseModel):
    """A full board snapshot published by the canonical side.

    ``origin`` names who caused the change. For replica-originated changes
    ``ack`` carries the sequence number of the push being reflected back.
    """

    model_config = ConfigDict(frozen=True)

    version: int = Field(ge=1)
    origin: Origin
    ack: Optional[int] = None
    state: BoardState

    def to_wire(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "origin": self.origin,
            "ack": self.ack,
            "state": self.state.to_wire(),
        }


class ReplicaPush(BaseModel):
    """The replica's issue list after a local edit."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=1)
    issues: List[Issue] = Field(default_factory=list)


__all__ = ["Origin", "ReplicaPush", "SnapshotMessage"]

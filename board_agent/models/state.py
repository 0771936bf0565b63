"""State models used by the LangGraph workflow."""
from __future__ import annotations

from operator import add
from typing import Annotated, Any, Dict, List, TypedDict


class AgentState(TypedDict):
    """Shared agent state used by LangGraph.

    ``rounds_without_read`` counts model calls since the agent last called
    ``get_issues``; ``board`` holds the latest published board snapshot.
    """

    messages: Annotated[List, add]
    rounds_without_read: int
    pending_reminders: List[str]
    board: Dict[str, Any]


__all__ = ["AgentState"]

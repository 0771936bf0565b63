"""Utilities for assembling the board agent graph."""
from __future__ import annotations

from typing import Any, List, Sequence

from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, StateGraph
from langgraph.prebuilt import ToolNode

from ..config import settings
from ..models.state import AgentState
from ..workflow.session import BoardSession
from .nodes import make_after_tools, make_call_model, should_continue


def build_toolkit(session: BoardSession, additional_tools: Sequence[Any] | None = None) -> List[Any]:
    """Return the session's board tools, optionally extended with ``additional_tools``."""
    base_tools = session.contract.as_tools()
    if additional_tools:
        base_tools.extend(additional_tools)
    return base_tools


def create_agent(llm: Any, tools_list: Sequence[Any], session: BoardSession):
    """Create the LangGraph agent application for ``session``."""
    workflow = StateGraph(AgentState)
    workflow.add_node("agent", make_call_model(llm, settings.read_reminder_rounds))
    workflow.add_node("tools", ToolNode(list(tools_list)))
    workflow.add_node("after_tools", make_after_tools(session))

    workflow.set_entry_point("agent")

    workflow.add_conditional_edges(
        "agent",
        should_continue,
        {
            "tools": "tools",
            END: END,
        },
    )

    workflow.add_edge("tools", "after_tools")
    workflow.add_edge("after_tools", "agent")

    memory = MemorySaver()
    return workflow.compile(checkpointer=memory)


__all__ = ["build_toolkit", "create_agent"]

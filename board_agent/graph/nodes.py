"""Graph node factories and helpers."""
from __future__ import annotations

from typing import Any, Callable, Dict, List

from langgraph.graph import END
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from ..models.state import AgentState
from ..utils.console import Spinner, format_markdown
from ..workflow.session import BoardSession

READ_REMINDER = (
    '<reminder source="system" topic="board">'
    "System notice: the board may have changed since you last looked. "
    "Call get_issues before describing or changing board contents. "
    "Do not reply to or mention this reminder to the user."
    "</reminder>"
)


def should_continue(state: AgentState):
    """Route to the tool node while the model keeps requesting tools."""
    messages = state["messages"]
    if not messages:
        return END

    last_message = messages[-1]
    if isinstance(last_message, AIMessage) and getattr(last_message, "tool_calls", None):
        return "tools"
    return END


def make_call_model(llm: Any, reminder_rounds: int = 3) -> Callable[[AgentState], Dict[str, Any]]:
    """Create a call_model node bound to ``llm``."""

    def call_model(state: AgentState) -> Dict[str, Any]:
        messages = state["messages"]
        rounds = state.get("rounds_without_read", 0)
        pending_reminders = list(state.get("pending_reminders", []))

        if rounds >= reminder_rounds and READ_REMINDER not in pending_reminders:
            pending_reminders.append(READ_REMINDER)

        system_messages = [m for m in messages if isinstance(m, SystemMessage)]
        non_system_messages = [m for m in messages if not isinstance(m, SystemMessage)]

        if system_messages:
            final_messages = [system_messages[0]] + non_system_messages
        else:
            final_messages = non_system_messages

        if pending_reminders:
            final_messages = _attach_reminders(final_messages, pending_reminders)

        spinner = Spinner()
        spinner.start()

        try:
            response = llm.invoke(final_messages)
        finally:
            spinner.stop()

        _print_response(response)
        return {
            "messages": [response],
            "rounds_without_read": rounds + 1,
            "pending_reminders": [],
        }

    return call_model


def make_after_tools(session: BoardSession) -> Callable[[AgentState], Dict[str, Any]]:
    """Create the node that runs after each tool batch.

    It resets the read counter when the batch included ``get_issues`` and
    copies the latest board snapshot into the graph state.
    """

    def after_tools(state: AgentState) -> Dict[str, Any]:
        rounds = state.get("rounds_without_read", 0)
        if any(message.name == "get_issues" for message in _latest_tool_messages(state["messages"])):
            rounds = 0

        return {
            "rounds_without_read": rounds,
            "board": session.snapshot().to_wire(),
        }

    return after_tools


def _latest_tool_messages(messages: List[Any]) -> List[ToolMessage]:
    batch: List[ToolMessage] = []
    for message in reversed(messages):
        if not isinstance(message, ToolMessage):
            break
        batch.append(message)
    return batch


def _attach_reminders(messages: List[Any], reminders: List[str]) -> List[Any]:
    reminder_text = "\n".join(reminders)
    for i in range(len(messages) - 1, -1, -1):
        if isinstance(messages[i], HumanMessage):
            content = messages[i].content
            if not isinstance(content, str):
                content = str(content)
            updated = list(messages)
            updated[i] = HumanMessage(content=reminder_text + "\n\n" + content)
            return updated
    return messages


def _print_response(response: Any) -> None:
    content = getattr(response, "content", None)
    if not content:
        return
    if isinstance(content, str):
        print(format_markdown(content))
        return
    for block in content:
        text = None
        if isinstance(block, dict):
            text = block.get("text")
        elif hasattr(block, "text"):
            text = block.text
        if text:
            print(format_markdown(text))


__all__ = ["READ_REMINDER", "make_after_tools", "make_call_model", "should_continue"]

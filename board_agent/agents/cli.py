"""Command-line interface entry point for the board agent."""
from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Sequence

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..config import settings
from ..errors import MissingCredentialError
from ..graph.builder import build_toolkit, create_agent
from ..models.board_view import summarize_board
from ..prompts.system import build_system_prompt
from ..sync.storage import ReplicaStorage
from ..utils.console import (
    INFO_COLOR,
    RESET,
    clear_screen,
    print_divider,
    print_error,
    print_info,
    render_banner,
    user_prompt_label,
)
from ..utils.filesystem import replica_path
from ..utils.log import setup_logging
from ..workflow.session import BoardSession
from .commands import run_command

logger = logging.getLogger(__name__)

EXIT_WORDS = {"q", "quit", "exit"}


def require_api_key() -> str:
    if not settings.api_key:
        raise MissingCredentialError(
            "API key not found. Set PASITHEA_API_KEY or GITHUB_TOKEN "
            "(for GitHub Models you can use the output of `gh auth token`)."
        )
    return settings.api_key


def build_llm(**overrides: Any) -> ChatOpenAI:
    """Construct the chat model used by the agent."""
    params = {
        "model": settings.agent_model,
        "api_key": require_api_key(),
        "base_url": settings.base_url,
        "temperature": settings.temperature,
    }
    params.update(overrides)
    return ChatOpenAI(**params)


def build_session() -> BoardSession:
    storage = ReplicaStorage(replica_path())
    return BoardSession(project_name=settings.project_name, storage=storage).start()


def initial_inputs(session: BoardSession) -> Dict[str, Any]:
    return {
        "messages": [SystemMessage(content=build_system_prompt(session.broadcaster.project_name))],
        "rounds_without_read": settings.read_reminder_rounds,
        "pending_reminders": [],
        "board": session.snapshot().to_wire(),
    }


def run_cli(additional_tools: Sequence[Any] | None = None) -> None:
    """Run the interactive CLI application."""
    setup_logging(settings.log_level)

    try:
        llm = build_llm()
    except MissingCredentialError as error:
        print_error(str(error))
        sys.exit(1)

    session = build_session()
    tools_list = build_toolkit(session, additional_tools)
    bound_llm = llm.bind_tools(tools_list)
    app = create_agent(bound_llm, tools_list, session)

    clear_screen()
    render_banner(f"{session.broadcaster.project_name} Board", "Iris, your board assistant")
    print(f"{INFO_COLOR}Replica: {replica_path()}{RESET}")
    print(f"{INFO_COLOR}Type /help for board commands, 'exit' to quit{RESET}\n")

    config = {
        "configurable": {"thread_id": "board_session"},
        "recursion_limit": settings.recursion_limit,
    }
    pending: Dict[str, Any] = initial_inputs(session)

    while True:
        try:
            line = input(user_prompt_label())
        except (EOFError, KeyboardInterrupt):
            break

        if not line or line.strip().lower() in EXIT_WORDS:
            break

        print_divider()
        if line.lstrip().startswith("/"):
            print(run_command(line, session.reconciler))
            print()
            continue

        messages: List[Any] = list(pending.get("messages", []))
        messages.append(HumanMessage(content=line))
        pending["messages"] = messages

        changes: List[List[Any]] = []
        stop_watching = session.reconciler.on_change(changes.append)
        try:
            for event in app.stream(pending, config):
                for key, value in event.items():
                    if key == "after_tools" and value and "board" in value:
                        logger.debug("Board now holds %d issues", len(value["board"]["issues"]))
            pending = {"messages": []}
        except Exception as error:  # pragma: no cover - runtime guard
            logger.exception("Agent turn failed")
            print_error(f"Error: {error}")
            pending["messages"] = messages[:-1]
        finally:
            stop_watching()

        if changes:
            print_info(summarize_board(changes[-1]))
        print()

    print_info(f"Board saved to {replica_path()}")


def main() -> None:
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI execution
    main()

"""Slash commands that edit the board replica directly, bypassing the agent."""
from __future__ import annotations

import shlex
from typing import Callable, Dict, List, Optional

from ..models.board_view import render_board
from ..models.issue import PRIORITIES, STATUSES, BoardState
from ..sync.reconciler import EDITABLE_FIELDS, ReplicaReconciler
from ..utils.text import split_labels

HELP_TEXT = """Board commands:
  /board                                   show the board
  /new <title> [#label] [!priority] [@assignee] [+status]
  /edit <id> field=value ...               fields: title description status priority assignee labels
  /move <id> <status>
  /delete <id>
  /help                                    show this help"""

Command = Callable[[ReplicaReconciler, List[str]], str]


def _require_status(value: str) -> str:
    if value not in STATUSES:
        raise ValueError(f"status must be one of {', '.join(STATUSES)}")
    return value


def _require_priority(value: str) -> str:
    if value not in PRIORITIES:
        raise ValueError(f"priority must be one of {', '.join(PRIORITIES)}")
    return value


def _show(replica: ReplicaReconciler, args: List[str]) -> str:
    return render_board(BoardState(issues=replica.issues, project_name=replica.project_name))


def _new(replica: ReplicaReconciler, args: List[str]) -> str:
    title_words: List[str] = []
    labels: List[str] = []
    priority: Optional[str] = None
    assignee: Optional[str] = None
    status: Optional[str] = None

    for token in args:
        if token.startswith("#") and len(token) > 1:
            labels.append(token[1:])
        elif token.startswith("!") and len(token) > 1:
            priority = _require_priority(token[1:])
        elif token.startswith("@") and len(token) > 1:
            assignee = token[1:]
        elif token.startswith("+") and len(token) > 1:
            status = _require_status(token[1:])
        else:
            title_words.append(token)

    issue = replica.create_issue(
        title=" ".join(title_words),
        status=status or "todo",
        priority=priority or "medium",
        assignee=assignee,
        labels=labels,
    )
    return f"Created issue {issue.id}: {issue.title}"


def _edit(replica: ReplicaReconciler, args: List[str]) -> str:
    if len(args) < 2:
        raise ValueError("usage: /edit <id> field=value ...")
    issue_id, assignments = args[0], args[1:]

    fields: Dict[str, object] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip().lower()
        if not sep or key not in EDITABLE_FIELDS:
            raise ValueError(f"expected field=value with field in {', '.join(EDITABLE_FIELDS)}")
        if key == "status":
            fields[key] = _require_status(value)
        elif key == "priority":
            fields[key] = _require_priority(value)
        elif key == "labels":
            fields[key] = split_labels(value)
        elif key == "title" and not value.strip():
            raise ValueError("title must not be empty")
        else:
            fields[key] = value

    if not replica.update_issue(issue_id, **fields):
        return f"Issue {issue_id} not found."
    return f"Updated issue {issue_id}"


def _move(replica: ReplicaReconciler, args: List[str]) -> str:
    if len(args) != 2:
        raise ValueError("usage: /move <id> <status>")
    issue_id, status = args[0], _require_status(args[1])
    if not replica.move_issue(issue_id, status):
        return f"Issue {issue_id} not found."
    return f"Moved issue {issue_id} to {status}"


def _delete(replica: ReplicaReconciler, args: List[str]) -> str:
    if len(args) != 1:
        raise ValueError("usage: /delete <id>")
    if not replica.delete_issue(args[0]):
        return f"Issue {args[0]} not found."
    return f"Deleted issue {args[0]}"


def _help(replica: ReplicaReconciler, args: List[str]) -> str:
    return HELP_TEXT


COMMANDS: Dict[str, Command] = {
    "board": _show,
    "new": _new,
    "edit": _edit,
    "move": _move,
    "delete": _delete,
    "help": _help,
}


def run_command(line: str, replica: ReplicaReconciler) -> str:
    """Execute one slash command against the replica and return its output."""
    try:
        parts = shlex.split(line.strip().lstrip("/"))
    except ValueError as error:
        return f"Error: {error}"
    if not parts:
        return HELP_TEXT

    name, args = parts[0].lower(), parts[1:]
    command = COMMANDS.get(name)
    if command is None:
        return f"Unknown command: /{name}. Type /help for commands."
    try:
        return command(replica, args)
    except ValueError as error:
        return f"Error: {error}"


__all__ = ["COMMANDS", "HELP_TEXT", "run_command"]

"""Console rendering of a board grouped by status column."""
from __future__ import annotations

from typing import Dict, Iterable, List

from ..utils.console import (
    BOLD,
    INFO_COLOR,
    PRIORITY_COLORS,
    RESET,
    STATUS_COLORS,
    STRIKE,
)
from .issue import STATUSES, BoardState, Issue

STATUS_LABELS: Dict[str, str] = {
    "backlog": "Backlog",
    "todo": "To Do",
    "in-progress": "In Progress",
    "done": "Done",
}


def group_by_status(issues: Iterable[Issue]) -> Dict[str, List[Issue]]:
    columns: Dict[str, List[Issue]] = {status: [] for status in STATUSES}
    for issue in issues:
        columns.setdefault(issue.status, []).append(issue)
    return columns


def board_stats(issues: Iterable[Issue]) -> Dict[str, int]:
    columns = group_by_status(issues)
    stats = {status: len(items) for status, items in columns.items()}
    stats["total"] = sum(stats.values())
    return stats


def summarize_board(issues: Iterable[Issue]) -> str:
    stats = board_stats(issues)
    if stats["total"] == 0:
        return "The board is empty."
    columns = ", ".join(f"{stats[status]} {STATUS_LABELS[status].lower()}" for status in STATUSES)
    noun = "issue" if stats["total"] == 1 else "issues"
    return f"Board updated: {stats['total']} {noun} ({columns})."


def render_board(state: BoardState) -> str:
    columns = group_by_status(state.issues)
    total = len(state.issues)

    lines: List[str] = [f"{BOLD}{state.project_name}{RESET} {INFO_COLOR}({total}){RESET}"]
    for status in STATUSES:
        items = columns[status]
        color = STATUS_COLORS[status]
        lines.append("")
        lines.append(f"{color}{BOLD}{STATUS_LABELS[status]}{RESET} {INFO_COLOR}{len(items)}{RESET}")
        if not items:
            lines.append(f"  {INFO_COLOR}(empty){RESET}")
            continue
        lines.extend(f"  {_decorate_line(issue)}" for issue in items)
    return "\n".join(lines)


def _decorate_line(issue: Issue) -> str:
    mark = "☒" if issue.status == "done" else "☐"
    text = f"{mark} {issue.title}"
    if issue.status == "done":
        text = f"{STATUS_COLORS['done']}{STRIKE}{text}{RESET}"
    else:
        text = f"{STATUS_COLORS[issue.status]}{text}{RESET}"

    details = [f"{PRIORITY_COLORS[issue.priority]}{issue.priority}{RESET}"]
    if issue.assignee:
        details.append(f"@{issue.assignee}")
    details.extend(f"#{label}" for label in issue.labels)
    return f"{INFO_COLOR}{issue.id}{RESET} {text} {INFO_COLOR}[{RESET}{' '.join(details)}{INFO_COLOR}]{RESET}"


__all__ = ["STATUS_LABELS", "board_stats", "group_by_status", "render_board", "summarize_board"]

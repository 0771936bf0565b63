"""Exceptions raised by the board agent.

Domain failures that the agent can recover from (unknown ids, invalid tool
arguments) are never raised; the tool layer reports them as result strings.
The exceptions below mark programming errors or fatal startup conditions.
"""
from __future__ import annotations


class BoardError(Exception):
    """Base class for board agent errors."""


class DuplicateIssueError(BoardError, ValueError):
    """Raised when an issue id is inserted twice into one store."""

    def __init__(self, issue_id: str) -> None:
        super().__init__(f"Issue {issue_id} already exists")
        self.issue_id = issue_id


class MissingCredentialError(BoardError, RuntimeError):
    """Raised at startup when no API key is configured."""


__all__ = ["BoardError", "DuplicateIssueError", "MissingCredentialError"]

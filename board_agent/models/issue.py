"""Issue and board state models shared by the agent and the replica."""
from __future__ import annotations

import secrets
from typing import Any, Dict, List, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field

Status = Literal["backlog", "todo", "in-progress", "done"]
Priority = Literal["low", "medium", "high", "critical"]

STATUSES: Tuple[str, ...] = get_args(Status)
PRIORITIES: Tuple[str, ...] = get_args(Priority)

DEFAULT_STATUS = "todo"
DEFAULT_PRIORITY = "medium"
DEFAULT_PROJECT_NAME = "Pasithea"

ISSUE_ID_PREFIX = "ISS-"


def generate_issue_id() -> str:
    """Return a random issue id such as ``ISS-3F09A1C2B7DE``."""
    return ISSUE_ID_PREFIX + secrets.token_hex(6).upper()


class Issue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Opaque identifier, unique within a store.")
    title: str = Field(min_length=1, description="Short summary of the work.")
    description: str = Field(default="", description="Longer free-form details.")
    status: Status = Field(default=DEFAULT_STATUS, description="Board column.")
    priority: Priority = Field(default=DEFAULT_PRIORITY, description="Priority level.")
    assignee: Optional[str] = Field(default=None, description="Person assigned to the issue.")
    labels: List[str] = Field(default_factory=list, description="Ordered tags.")
    created_at: str = Field(alias="createdAt", description="ISO-8601 creation time.")
    updated_at: str = Field(alias="updatedAt", description="ISO-8601 time of the last mutation.")

    def to_wire(self) -> Dict[str, Any]:
        """Return the camelCase mapping exchanged with the agent and the replica."""
        return self.model_dump(by_alias=True, exclude_none=True)


class BoardState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    issues: List[Issue] = Field(default_factory=list)
    project_name: str = Field(default=DEFAULT_PROJECT_NAME, alias="projectName")

    def to_wire(self) -> Dict[str, Any]:
        return {
            "issues": [issue.to_wire() for issue in self.issues],
            "projectName": self.project_name,
        }


__all__ = [
    "BoardState",
    "DEFAULT_PRIORITY",
    "DEFAULT_PROJECT_NAME",
    "DEFAULT_STATUS",
    "Issue",
    "PRIORITIES",
    "Priority",
    "STATUSES",
    "Status",
    "generate_issue_id",
]

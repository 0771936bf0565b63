"""Board tools exposed to the reasoning engine.

Each tool is declared once in an explicit registry: a name, a description,
a pydantic schema for its parameters and a handler. Arguments are validated
against the schema before the handler runs. Handlers never raise for domain
problems; an unknown id or an invalid argument comes back as a sentence the
agent can relay to the user.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Type,
    Union,
    get_args,
    get_origin,
)

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import settings
from ..models.issue import DEFAULT_PRIORITY, DEFAULT_STATUS, Issue, Priority, Status
from ..store.issue_store import IssueStore
from ..sync.broadcaster import StateBroadcaster
from ..utils.console import pretty_sub_line, pretty_tool_line
from ..utils.text import clamp_text

logger = logging.getLogger(__name__)

ToolResult = Union[str, Dict[str, Any], List[Dict[str, Any]]]

STATUS_HINT = "backlog, todo, in-progress, done"
PRIORITY_HINT = "low, medium, high, critical"


class GetIssuesInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateIssueInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(description="Title of the issue")
    description: Optional[str] = Field(default=None, description="Description of the issue")
    status: Optional[Status] = Field(default=None, description=f"Status: {STATUS_HINT}")
    priority: Optional[Priority] = Field(default=None, description=f"Priority: {PRIORITY_HINT}")
    assignee: Optional[str] = Field(default=None, description="Assignee name")
    labels: Optional[List[str]] = Field(default=None, description="Labels/tags")

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value


class UpdateIssueInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(description="ID of the issue to update")
    title: Optional[str] = Field(default=None, description="New title")
    description: Optional[str] = Field(default=None, description="New description")
    status: Optional[Status] = Field(default=None, description=f"New status: {STATUS_HINT}")
    priority: Optional[Priority] = Field(default=None, description=f"New priority: {PRIORITY_HINT}")
    assignee: Optional[str] = Field(default=None, description="New assignee")
    labels: Optional[List[str]] = Field(default=None, description="New labels")

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None


class DeleteIssueInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(description="ID of the issue to delete")


class MoveIssueInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(description="ID of the issue to move")
    status: Status = Field(description=f"New status: {STATUS_HINT}")


@dataclass(frozen=True)
class ToolSpec:
    name: str
    title: str
    description: str
    args_schema: Type[BaseModel]
    handler: Callable[[Any], ToolResult]


def format_validation_error(tool_name: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "arguments"
        problems.append(f"{location}: {item.get('msg')}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


def describe_parameters(schema: Type[BaseModel]) -> List[Dict[str, Any]]:
    """Flatten a tool schema into ``name/type/required/enum`` entries."""
    parameters: List[Dict[str, Any]] = []
    for name, field in schema.model_fields.items():
        annotation = _strip_optional(field.annotation)
        entry: Dict[str, Any] = {
            "name": name,
            "type": "string",
            "required": field.is_required(),
            "description": field.description or "",
        }
        if get_origin(annotation) is Literal:
            entry["enum"] = list(get_args(annotation))
        elif get_origin(annotation) is list:
            entry["type"] = "string[]"
        parameters.append(entry)
    return parameters


def _strip_optional(annotation: Any) -> Any:
    if get_origin(annotation) is Union:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


class ToolContract:
    """The fixed set of board operations an agent may invoke."""

    def __init__(self, store: IssueStore, broadcaster: Optional[StateBroadcaster] = None) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._registry: Dict[str, ToolSpec] = {}

        for spec in (
            ToolSpec(
                "get_issues",
                "GetIssues",
                "Get all issues on the board. Call this before answering anything about the board.",
                GetIssuesInput,
                self._get_issues,
            ),
            ToolSpec(
                "create_issue",
                "CreateIssue",
                "Create a new issue on the board.",
                CreateIssueInput,
                self._create_issue,
            ),
            ToolSpec(
                "update_issue",
                "UpdateIssue",
                "Update an existing issue's fields. Omitted fields are left unchanged.",
                UpdateIssueInput,
                self._update_issue,
            ),
            ToolSpec(
                "delete_issue",
                "DeleteIssue",
                "Delete an issue from the board.",
                DeleteIssueInput,
                self._delete_issue,
            ),
            ToolSpec(
                "move_issue",
                "MoveIssue",
                "Move an issue to a different status column.",
                MoveIssueInput,
                self._move_issue,
            ),
        ):
            self.register(spec)

    @property
    def names(self) -> List[str]:
        return list(self._registry)

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._registry:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._registry[spec.name] = spec

    def spec(self, name: str) -> ToolSpec:
        return self._registry[name]

    def parameters(self, name: str) -> List[Dict[str, Any]]:
        return describe_parameters(self._registry[name].args_schema)

    def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Validate ``arguments`` against the tool schema and run the handler."""
        spec = self._registry.get(name)
        if spec is None:
            return f"Unknown tool: {name}"
        try:
            args = spec.args_schema.model_validate(dict(arguments or {}))
        except ValidationError as error:
            logger.info("Rejected %s call: %s", name, error.error_count())
            return format_validation_error(name, error)
        return spec.handler(args)

    def as_tools(self) -> List[BaseTool]:
        """Wrap every registered operation as a LangChain structured tool."""
        return [self._as_tool(spec) for spec in self._registry.values()]

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _get_issues(self, args: GetIssuesInput) -> List[Dict[str, Any]]:
        issues = self._store.list()
        logger.info("Getting issues, count: %d", len(issues))
        return [issue.to_wire() for issue in issues]

    def _create_issue(self, args: CreateIssueInput) -> Dict[str, Any]:
        now = self._store.now()
        issue = Issue(
            id=self._store.new_id(),
            title=args.title,
            description=args.description or "",
            status=args.status or DEFAULT_STATUS,
            priority=args.priority or DEFAULT_PRIORITY,
            assignee=args.assignee or None,
            labels=list(args.labels or []),
            created_at=now,
            updated_at=now,
        )
        self._store.insert(issue)
        logger.info("Created issue: %s - %s", issue.id, issue.title)
        self._publish()
        return issue.to_wire()

    def _update_issue(self, args: UpdateIssueInput) -> str:
        changes = {
            key: value
            for key, value in args.model_dump(exclude={"id"}).items()
            if not _is_blank(value)
        }
        if not self._store.update(args.id, changes):
            return f"Issue {args.id} not found."
        logger.info("Updated issue: %s (%s)", args.id, ", ".join(sorted(changes)) or "touch")
        self._publish()
        return f"Updated issue {args.id}"

    def _delete_issue(self, args: DeleteIssueInput) -> str:
        removed = self._store.remove(args.id)
        logger.info("Deleted issue: %s, removed: %d", args.id, removed)
        if not removed:
            return f"Issue {args.id} not found."
        self._publish()
        return f"Deleted issue {args.id}"

    def _move_issue(self, args: MoveIssueInput) -> str:
        if not self._store.update(args.id, {"status": args.status}):
            return f"Issue {args.id} not found."
        logger.info("Moved issue %s to %s", args.id, args.status)
        self._publish()
        return f"Moved issue {args.id} to {args.status}"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _publish(self) -> None:
        if self._broadcaster is not None:
            self._broadcaster.publish(origin="agent")

    def _as_tool(self, spec: ToolSpec) -> BaseTool:
        def run(**kwargs: Any) -> str:
            pretty_tool_line(spec.title, _summarize(kwargs))
            result = self.invoke(spec.name, kwargs)
            content = result if isinstance(result, str) else json.dumps(result)
            pretty_sub_line(clamp_text(content, settings.max_tool_result_chars))
            return content

        def on_invalid(error: ValidationError) -> str:
            message = format_validation_error(spec.name, error)
            pretty_tool_line(spec.title, None)
            pretty_sub_line(message)
            return message

        return StructuredTool.from_function(
            func=run,
            name=spec.name,
            description=spec.description,
            args_schema=spec.args_schema,
            handle_validation_error=on_invalid,
        )


def _summarize(arguments: Mapping[str, Any]) -> Optional[str]:
    if not arguments:
        return None
    return ", ".join(f"{key}={value}" for key, value in arguments.items() if value is not None)


__all__ = [
    "CreateIssueInput",
    "DeleteIssueInput",
    "GetIssuesInput",
    "MoveIssueInput",
    "ToolContract",
    "ToolSpec",
    "UpdateIssueInput",
    "describe_parameters",
    "format_validation_error",
]

"""Filesystem helpers constrained to the configured workspace."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import settings


class WorkspacePathError(ValueError):
    """Raised when a configured path escapes the workspace."""


def safe_path(path_value: str, workspace: Optional[Path] = None) -> Path:
    """Resolve ``path_value`` inside the workspace.

    Args:
        path_value: Workspace-relative path, typically from configuration.
        workspace: Root to resolve against; defaults to ``settings.workspace``.

    Returns:
        A normalized absolute :class:`~pathlib.Path` inside the workspace.
    """

    root = Path(workspace or settings.workspace).resolve()
    abs_path = (root / str(path_value or "")).resolve()
    try:
        abs_path.relative_to(root)
    except ValueError as exc:
        raise WorkspacePathError(f"Path escapes workspace: {path_value}") from exc
    return abs_path


def replica_path(workspace: Optional[Path] = None) -> Path:
    """Return the location of the persisted board replica."""
    return safe_path(settings.replica_file, workspace)


__all__ = ["WorkspacePathError", "replica_path", "safe_path"]

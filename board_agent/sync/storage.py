"""Durable local storage for the UI replica."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..models.issue import Issue
from ..utils.clock import parse_timestamp

logger = logging.getLogger(__name__)

STORAGE_KEY = "pasithea-issues"


class ReplicaStorage:
    """A keyed string store backed by one JSON file.

    Mirrors browser local storage: each key maps to a serialized blob.
    The replica lives under ``key`` as a JSON array of issues.
    """

    def __init__(self, path: Path, key: str = STORAGE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_map().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_map()
        data[key] = value
        self._write_map(data)

    def remove_item(self, key: str) -> None:
        data = self._read_map()
        if data.pop(key, None) is not None:
            self._write_map(data)

    def load(self) -> List[Issue]:
        """Return the stored replica, or an empty list if it is missing or malformed.

        A malformed blob is removed so the next start begins clean.
        """
        raw = self.get_item(self.key)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
            if not isinstance(parsed, list):
                raise ValueError("stored replica is not a list")
            issues = [Issue.model_validate(item) for item in parsed]
            _check_replica(issues)
        except (ValueError, TypeError, ValidationError) as exc:
            logger.debug("Discarding malformed replica in %s: %s", self.path, exc)
            self.remove_item(self.key)
            return []
        return issues

    def save(self, issues: Iterable[Issue]) -> None:
        payload = json.dumps([issue.to_wire() for issue in issues])
        self.set_item(self.key, payload)

    def _read_map(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            logger.debug("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_map(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        scratch = self.path.with_name(self.path.name + ".tmp")
        scratch.write_text(json.dumps(data, indent=2), encoding="utf-8")
        scratch.replace(self.path)


def _check_replica(issues: List[Issue]) -> None:
    seen = set()
    for issue in issues:
        if issue.id in seen:
            raise ValueError(f"duplicate issue id {issue.id}")
        seen.add(issue.id)
        if parse_timestamp(issue.updated_at) < parse_timestamp(issue.created_at):
            raise ValueError(f"issue {issue.id} was updated before it was created")


__all__ = ["ReplicaStorage", "STORAGE_KEY"]

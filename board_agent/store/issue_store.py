"""Canonical issue collection owned by a single board session."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from ..errors import DuplicateIssueError
from ..models.issue import Issue, generate_issue_id
from ..utils.clock import Clock, next_after, system_now, utc_now

logger = logging.getLogger(__name__)

_FROZEN_FIELDS = frozenset({"id", "created_at", "updated_at"})


class IssueStore:
    """Ordered collection of issues with single-issue mutations.

    Lookups for unknown ids return ``None``/``False``/``0`` instead of
    raising; callers decide how to report absence. Issues handed out by
    :meth:`list` and :meth:`find_by_id` are copies.
    """

    def __init__(
        self,
        issues: Optional[Iterable[Issue]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._issues: List[Issue] = []
        self._clock = clock or system_now
        for issue in issues or []:
            self.insert(issue)

    def __len__(self) -> int:
        return len(self._issues)

    def __contains__(self, issue_id: object) -> bool:
        return self._index_of(issue_id) is not None

    def now(self) -> str:
        return utc_now(self._clock)

    def new_id(self) -> str:
        """Draw a random id that is not used by any issue in this store."""
        while True:
            candidate = generate_issue_id()
            if candidate not in self:
                return candidate

    def list(self) -> List[Issue]:
        return [issue.model_copy(deep=True) for issue in self._issues]

    def find_by_id(self, issue_id: str) -> Optional[Issue]:
        index = self._index_of(issue_id)
        if index is None:
            return None
        return self._issues[index].model_copy(deep=True)

    def insert(self, issue: Issue) -> None:
        if issue.id in self:
            raise DuplicateIssueError(issue.id)
        self._issues.append(issue.model_copy(deep=True))

    def update(self, issue_id: str, fields: Mapping[str, Any]) -> bool:
        """Apply ``fields`` to one issue and refresh its ``updated_at``.

        The new record is validated as a whole before it replaces the old
        one, so a rejected value leaves the issue untouched.
        """

        frozen = _FROZEN_FIELDS.intersection(fields)
        if frozen:
            raise ValueError(f"Cannot update read-only fields: {', '.join(sorted(frozen))}")

        index = self._index_of(issue_id)
        if index is None:
            return False

        current = self._issues[index]
        data = current.model_dump()
        data.update(fields)
        data["updated_at"] = next_after(current.updated_at, self._clock)
        self._issues[index] = Issue.model_validate(data)
        return True

    def remove(self, issue_id: str) -> int:
        index = self._index_of(issue_id)
        if index is None:
            return 0
        del self._issues[index]
        return 1

    def replace(self, issues: Iterable[Issue]) -> None:
        """Overwrite the whole collection, keeping the id uniqueness invariant."""
        incoming = [issue.model_copy(deep=True) for issue in issues]
        seen = set()
        for issue in incoming:
            if issue.id in seen:
                raise DuplicateIssueError(issue.id)
            seen.add(issue.id)
        self._issues = incoming
        logger.debug("Replaced store contents, count: %d", len(incoming))

    def _index_of(self, issue_id: object) -> Optional[int]:
        for index, issue in enumerate(self._issues):
            if issue.id == issue_id:
                return index
        return None


__all__ = ["IssueStore"]

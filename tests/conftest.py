"""Shared fixtures for the board agent tests."""
from datetime import datetime, timedelta, timezone

import pytest

from board_agent.models.issue import Issue
from board_agent.store.issue_store import IssueStore
from board_agent.sync.storage import ReplicaStorage
from board_agent.workflow.session import BoardSession


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, start=None):
        self.current = start or datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


def make_issue(issue_id, title="Sample issue", **fields):
    stamp = fields.pop("stamp", "2026-01-01T00:00:00.000000Z")
    return Issue(
        id=issue_id,
        title=title,
        created_at=stamp,
        updated_at=stamp,
        **fields,
    )


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store(clock):
    return IssueStore(clock=clock)


@pytest.fixture
def storage(tmp_path):
    return ReplicaStorage(tmp_path / "replica.json")


@pytest.fixture
def session(storage, clock):
    return BoardSession(project_name="Pasithea", storage=storage, clock=clock).start()

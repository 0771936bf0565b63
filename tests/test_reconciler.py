"""Tests for the replica reconciler."""

import pytest

from board_agent.models.issue import BoardState
from board_agent.sync.messages import SnapshotMessage
from board_agent.sync.reconciler import ReplicaReconciler

from conftest import make_issue


def snapshot(version, issues, origin="agent", ack=None, project_name="Pasithea"):
    return SnapshotMessage(
        version=version,
        origin=origin,
        ack=ack,
        state=BoardState(issues=issues, project_name=project_name),
    )


@pytest.fixture
def outbox():
    return []


@pytest.fixture
def replica(storage, clock, outbox):
    reconciler = ReplicaReconciler(storage=storage, send=outbox.append, clock=clock)
    reconciler.hydrate()
    return reconciler


class TestLocalEdits:
    def test_create_pushes_once(self, replica, outbox):
        issue = replica.create_issue("Fix bug", labels=["ui", "ui", " ", "api"])

        assert issue.labels == ["ui", "api"]
        assert issue.created_at == issue.updated_at
        assert [push.sequence for push in outbox] == [1]
        assert [i.id for i in outbox[0].issues] == [issue.id]
        assert replica.in_flight == [1]

    def test_create_requires_title(self, replica, outbox):
        with pytest.raises(ValueError):
            replica.create_issue("   ")
        assert outbox == []

    def test_update_skips_none_and_refreshes_timestamp(self, replica):
        issue = replica.create_issue("Old", description="keep")

        assert replica.update_issue(issue.id, title="New", description=None) is True

        updated = replica.find(issue.id)
        assert updated.title == "New"
        assert updated.description == "keep"
        assert updated.updated_at > issue.updated_at

    def test_update_can_clear_assignee(self, replica):
        issue = replica.create_issue("Owned", assignee="ana")

        replica.update_issue(issue.id, assignee="")

        assert replica.find(issue.id).assignee is None

    def test_move_changes_status_only(self, replica):
        issue = replica.create_issue("Card", labels=["x"])

        replica.move_issue(issue.id, "done")

        moved = replica.find(issue.id)
        assert moved.status == "done"
        assert (moved.title, moved.labels, moved.created_at) == (issue.title, issue.labels, issue.created_at)

    def test_unknown_ids_do_not_push(self, replica, outbox):
        assert replica.update_issue("ISS-404", title="x") is False
        assert replica.move_issue("ISS-404", "done") is False
        assert replica.delete_issue("ISS-404") is False
        assert outbox == []

    @pytest.mark.parametrize("field", ["stauts", "id", "created_at", "updated_at"])
    def test_update_rejects_fields_that_cannot_be_edited(self, replica, outbox, field):
        issue = replica.create_issue("Card")

        with pytest.raises(ValueError, match=field):
            replica.update_issue(issue.id, **{field: "done"})

        assert replica.find(issue.id).to_wire() == issue.to_wire()
        assert len(outbox) == 1

    def test_delete(self, replica, outbox):
        issue = replica.create_issue("Gone soon")

        assert replica.delete_issue(issue.id) is True
        assert replica.issues == []
        assert [i.issues for i in outbox][-1] == []

    def test_replace_all_pushes_the_new_list(self, replica, outbox):
        replica.create_issue("Dropped")

        replica.replace_all([make_issue("ISS-B"), make_issue("ISS-A")])

        assert [issue.id for issue in replica.issues] == ["ISS-B", "ISS-A"]
        assert [issue.id for issue in outbox[-1].issues] == ["ISS-B", "ISS-A"]
        assert replica.pushes_sent == 2

    def test_on_change_listener_can_be_removed(self, replica):
        seen = []
        remove = replica.on_change(seen.append)

        replica.create_issue("One")
        remove()
        replica.create_issue("Two")

        assert [[issue.title for issue in issues] for issues in seen] == [["One"]]

    def test_state_is_applying_local_while_committing(self, replica):
        states = []
        replica.on_change(lambda issues: states.append(replica.state))

        replica.create_issue("Card")

        assert states == ["applying-local"]
        assert replica.state == "idle"


class TestInboundSnapshots:
    def test_remote_snapshot_overwrites_without_pushing(self, replica, outbox):
        replica.create_issue("Local")
        outbox.clear()

        changed = replica.receive(snapshot(1, [make_issue("ISS-A", title="Remote")], project_name="Apollo"))

        assert changed is True
        assert [issue.title for issue in replica.issues] == ["Remote"]
        assert replica.project_name == "Apollo"
        assert outbox == []
        assert replica.remote_applied == 1

    def test_empty_snapshot_wins(self, replica):
        replica.receive(snapshot(1, [make_issue("ISS-A")]))

        replica.receive(snapshot(2, []))

        assert replica.issues == []

    def test_stale_versions_are_dropped(self, replica):
        replica.receive(snapshot(2, [make_issue("ISS-B")]))

        assert replica.receive(snapshot(1, [make_issue("ISS-A")])) is False
        assert [issue.id for issue in replica.issues] == ["ISS-B"]
        assert replica.stale_dropped == 1

    def test_echo_is_consumed(self, replica, outbox):
        issue = replica.create_issue("Mine")

        changed = replica.receive(snapshot(1, outbox[0].issues, origin="replica", ack=1))

        assert changed is False
        assert replica.echoes_consumed == 1
        assert replica.remote_applied == 0
        assert replica.in_flight == []
        assert len(outbox) == 1
        assert [i.id for i in replica.issues] == [issue.id]

    def test_older_echo_does_not_revert_newer_local_edit(self, replica, outbox):
        issue = replica.create_issue("First")
        replica.update_issue(issue.id, title="Second")

        replica.receive(snapshot(1, outbox[0].issues, origin="replica", ack=1))

        assert replica.find(issue.id).title == "Second"
        assert replica.in_flight == [2]

        replica.receive(snapshot(2, outbox[1].issues, origin="replica", ack=2))

        assert replica.in_flight == []
        assert len(outbox) == 2
        assert replica.remote_applied == 0

    def test_echo_carrying_different_state_is_applied(self, replica, outbox):
        replica.create_issue("Mine")
        canonical = [make_issue("ISS-Z", title="Canonical")]

        changed = replica.receive(snapshot(1, canonical, origin="replica", ack=1))

        assert changed is True
        assert [issue.id for issue in replica.issues] == ["ISS-Z"]
        assert len(outbox) == 1

    def test_unmatched_replica_snapshot_is_treated_as_remote(self, replica):
        replica.receive(snapshot(1, [make_issue("ISS-A")], origin="replica", ack=99))

        assert replica.remote_applied == 1
        assert replica.echoes_consumed == 0

    def test_state_is_applying_remote_while_notifying(self, replica):
        states = []
        replica.on_change(lambda issues: states.append(replica.state))

        replica.receive(snapshot(1, [make_issue("ISS-A")]))

        assert states == ["applying-remote"]


class TestPersistence:
    def test_every_change_is_persisted(self, replica, storage):
        issue = replica.create_issue("Saved")
        assert [i.id for i in storage.load()] == [issue.id]

        replica.receive(snapshot(1, [make_issue("ISS-R")]))
        assert [i.id for i in storage.load()] == ["ISS-R"]

    def test_no_write_before_hydration(self, storage, clock):
        storage.save([make_issue("ISS-KEEP")])
        replica = ReplicaReconciler(storage=storage, clock=clock)

        replica.receive(snapshot(1, []))

        assert [i.id for i in storage.load()] == ["ISS-KEEP"]

    def test_hydrate_restores_stored_replica_once(self, storage, clock):
        storage.save([make_issue("ISS-1"), make_issue("ISS-2")])
        replica = ReplicaReconciler(storage=storage, clock=clock)

        assert [i.id for i in replica.hydrate()] == ["ISS-1", "ISS-2"]
        storage.save([])
        assert [i.id for i in replica.hydrate()] == ["ISS-1", "ISS-2"]

    def test_malformed_storage_starts_empty(self, storage, clock):
        storage.set_item(storage.key, "{not json")
        replica = ReplicaReconciler(storage=storage, clock=clock)

        assert replica.hydrate() == []
        assert replica.hydrated is True

    def test_start_pushes_stored_issues(self, storage, clock, outbox):
        storage.save([make_issue("ISS-1")])
        replica = ReplicaReconciler(storage=storage, send=outbox.append, clock=clock)

        replica.start()

        assert [[i.id for i in push.issues] for push in outbox] == [["ISS-1"]]

    def test_start_with_nothing_stored_does_not_push(self, storage, clock, outbox):
        replica = ReplicaReconciler(storage=storage, send=outbox.append, clock=clock)

        replica.start()

        assert outbox == []

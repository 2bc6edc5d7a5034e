"""Pure snapshot mutations."""

from __future__ import annotations

import pytest

from teamload.domain.entities import AppData, ProjectStatus, ProjectVisibility
from teamload.errors import ValidationError
from teamload.services import metrics, snapshot
from tests.conftest import W1, W2, W3


def test_mutations_never_touch_the_input(team):
    before = team.allocations

    snapshot.apply_allocation(team, "m1", "p1", W1, 0.9)
    snapshot.remove_member(team, "m1")
    snapshot.remove_assignment(team, "m1", "p1")

    assert team.allocations is before
    assert len(team.allocations) == 4


def test_remove_member_cascades_allocations(team):
    data = snapshot.remove_member(team, "m1")

    assert [m.id for m in data.members] == ["m2"]
    assert [a.id for a in data.allocations] == ["a4"]
    assert snapshot.find_orphans(data) == []


def test_remove_project_cascades_allocations(team):
    data = snapshot.remove_project(team, "p1")

    assert [p.id for p in data.projects] == ["p2"]
    assert [a.id for a in data.allocations] == ["a2"]


def test_add_member_defaults_role_and_rejects_blank_name():
    data = snapshot.add_member(AppData.empty(), name="  Dana  ", role="")

    (member,) = data.members
    assert member.name == "Dana"
    assert member.role == snapshot.DEFAULT_ROLE
    assert len(member.id) == 12

    with pytest.raises(ValidationError):
        snapshot.add_member(data, name="   ")


def test_add_member_rejects_duplicate_id(team):
    with pytest.raises(ValidationError):
        snapshot.add_member(team, name="Clone", member_id="m1")


def test_update_member_keeps_unspecified_fields(team):
    data = snapshot.update_member(team, "m2", role="Architect")

    member = data.get_member("m2")
    assert member.name == "Bob Smith"
    assert member.role == "Architect"

    with pytest.raises(ValidationError):
        snapshot.update_member(team, "ghost", name="X")


def test_add_project_is_active_and_ongoing_by_default():
    data = snapshot.add_project(AppData.empty(), name="Warehouse", project_id="p9")

    project = data.get_project("p9")
    assert project.status == ProjectVisibility.ACTIVE
    assert project.project_status == ProjectStatus.ONGOING


def test_toggle_project_archived_flips_visibility(team):
    archived = snapshot.toggle_project_archived(team, "p1")
    assert not archived.get_project("p1").is_active

    restored = snapshot.toggle_project_archived(archived, "p1")
    assert restored.get_project("p1").is_active
    # Archiving keeps allocations
    assert len(archived.allocations) == len(team.allocations)


def test_update_project_accepts_enum_values(team):
    data = snapshot.update_project(team, "p2", status="active", project_status="ongoing")

    project = data.get_project("p2")
    assert project.status is ProjectVisibility.ACTIVE
    assert project.project_status is ProjectStatus.ONGOING


def test_apply_allocation_updates_existing_cell_in_place(team):
    data = snapshot.apply_allocation(team, "m1", "p1", W1, 0.7)

    cell = snapshot.find_allocation(data, "m1", "p1", W1)
    assert cell.id == "a1"
    assert cell.value == 0.7
    assert len(data.allocations) == 4


def test_apply_allocation_appends_new_cell(team):
    data = snapshot.apply_allocation(team, "m2", "p1", W1, 0.4, allocation_id="new1")

    cell = snapshot.find_allocation(data, "m2", "p1", W1)
    assert cell.id == "new1"
    assert len(data.allocations) == 5


def test_apply_allocation_zero_removes_cell(team):
    data = snapshot.apply_allocation(team, "m1", "p1", W2, 0)

    assert snapshot.find_allocation(data, "m1", "p1", W2) is None
    assert len(data.allocations) == 3


def test_apply_allocation_zero_on_empty_cell_is_noop(team):
    data = snapshot.apply_allocation(team, "m2", "p2", W1, 0)

    assert data is team


def test_alice_loses_one_week_of_migration(team):
    data = snapshot.apply_allocation(team, "m1", "p1", W2, 0)
    data = snapshot.apply_allocation(data, "m1", "p1", W3, 0.2)

    migration = sorted(
        (a.week_date, a.value) for a in data.allocations if a.key[:2] == ("m1", "p1")
    )
    assert migration == [(W1, 0.5), (W3, 0.2)]


def test_remove_assignment_drops_every_week(team):
    data = snapshot.remove_assignment(team, "m1", "p1")

    assert [a.id for a in data.allocations] == ["a2", "a4"]


def test_find_orphans_reports_dangling_rows(team):
    data = team.replace(members=[m for m in team.members if m.id != "m2"])

    assert [a.id for a in snapshot.find_orphans(data)] == ["a4"]


def test_empty_board_to_one_cell_and_back():
    data = snapshot.add_member(AppData.empty(), name="Alice", role="DBA", member_id="alice")
    data = snapshot.add_project(data, name="Migration", project_id="mig")

    data = snapshot.apply_allocation(data, "alice", "mig", W1, 0.6)
    assert metrics.member_load("alice", W1, data.allocations) == 0.6

    data = snapshot.apply_allocation(data, "alice", "mig", W1, 0)
    assert metrics.member_load("alice", W1, data.allocations) == 0
    assert data.allocations == ()

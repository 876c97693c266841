from datetime import date

import pytest

from schednet_core.exceptions import (
    CircularHierarchyError,
    ScheduleIntegrityError,
    UnknownTaskError,
    ValidationError,
)
from schednet_core.models import ChildPolicy
from schednet_infra.db.models import TaskORM


def test_wbs_codes_follow_tree_shape(services, schedule):
    ts = services["task_service"]

    phase1 = ts.create_task(schedule.id, "Phase 1", date(2026, 3, 2))
    phase2 = ts.create_task(schedule.id, "Phase 2", date(2026, 3, 2))
    design = ts.create_task(schedule.id, "Design", date(2026, 3, 2), parent_task_id=phase1.id)
    build = ts.create_task(schedule.id, "Build", date(2026, 3, 2), parent_task_id=phase1.id)
    wiring = ts.create_task(schedule.id, "Wiring", date(2026, 3, 2), parent_task_id=build.id)

    codes = {t.id: (t.wbs_code, t.level) for t in ts.list_tasks(schedule.id)}
    assert codes[phase1.id] == ("1", 0)
    assert codes[phase2.id] == ("2", 0)
    assert codes[design.id] == ("1.1", 1)
    assert codes[build.id] == ("1.2", 1)
    assert codes[wiring.id] == ("1.2.1", 2)

    assert [t.title for t in ts.list_tasks(schedule.id)] == [
        "Phase 1", "Design", "Build", "Wiring", "Phase 2",
    ]


def test_insert_at_taken_order_index_shifts_later_siblings(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    c = ts.create_task(schedule.id, "C", date(2026, 3, 2), order_index=b.order_index)

    assert ts.get_task(a.id).wbs_code == "1"
    assert ts.get_task(c.id).wbs_code == "2"
    assert ts.get_task(b.id).wbs_code == "3"

    indexes = [t.order_index for t in ts.list_tasks(schedule.id)]
    assert len(indexes) == len(set(indexes))


def test_reparent_under_own_descendant_is_rejected_and_tree_unchanged(services, schedule):
    ts = services["task_service"]

    x = ts.create_task(schedule.id, "X", date(2026, 3, 2))
    y = ts.create_task(schedule.id, "Y", date(2026, 3, 2), parent_task_id=x.id)
    z = ts.create_task(schedule.id, "Z", date(2026, 3, 2), parent_task_id=y.id)

    with pytest.raises(CircularHierarchyError):
        ts.update_task(x.id, parent_task_id=z.id)
    with pytest.raises(CircularHierarchyError):
        ts.update_task(x.id, parent_task_id=x.id)

    assert ts.get_task(x.id).parent_task_id is None
    assert ts.get_task(y.id).parent_task_id == x.id
    assert ts.get_task(z.id).wbs_code == "1.1.1"


def test_move_task_renumbers_both_subtrees(services, schedule):
    ts = services["task_service"]

    p1 = ts.create_task(schedule.id, "P1", date(2026, 3, 2))
    p2 = ts.create_task(schedule.id, "P2", date(2026, 3, 2))
    a = ts.create_task(schedule.id, "A", date(2026, 3, 2), parent_task_id=p1.id)
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2), parent_task_id=p1.id)

    ts.update_task(a.id, parent_task_id=p2.id)

    assert ts.get_task(a.id).wbs_code == "2.1"
    assert ts.get_task(b.id).wbs_code == "1.1"

    ts.update_task(a.id, parent_task_id=None)
    assert ts.get_task(a.id).wbs_code == "3"
    assert ts.get_task(a.id).level == 0


def test_parent_must_exist_and_share_schedule(services, schedule):
    ts = services["task_service"]
    other = services["schedule_service"].create_schedule("Other")
    foreign = ts.create_task(other.id, "Foreign", date(2026, 3, 2))

    with pytest.raises(ValidationError) as exc:
        ts.create_task(schedule.id, "Child", date(2026, 3, 2), parent_task_id=foreign.id)
    assert exc.value.code == "PARENT_CROSS_SCHEDULE"

    with pytest.raises(UnknownTaskError):
        ts.create_task(schedule.id, "Child", date(2026, 3, 2), parent_task_id="missing")
    assert ts.list_tasks(schedule.id) == []


def test_delete_parent_promotes_children_to_root(services, schedule):
    ts = services["task_service"]

    first = ts.create_task(schedule.id, "First", date(2026, 3, 2))
    parent = ts.create_task(schedule.id, "Parent", date(2026, 3, 2))
    c1 = ts.create_task(schedule.id, "C1", date(2026, 3, 2), parent_task_id=parent.id)
    c2 = ts.create_task(schedule.id, "C2", date(2026, 3, 2), parent_task_id=parent.id)

    ts.delete_task(parent.id)

    assert ts.get_task(first.id).wbs_code == "1"
    assert ts.get_task(c1.id).parent_task_id is None
    assert ts.get_task(c1.id).wbs_code == "2"
    assert ts.get_task(c2.id).wbs_code == "3"
    with pytest.raises(UnknownTaskError):
        ts.get_task(parent.id)


def test_delete_parent_can_reparent_children_to_grandparent(services, schedule):
    ts = services["task_service"]

    grand = ts.create_task(schedule.id, "Grand", date(2026, 3, 2))
    parent = ts.create_task(schedule.id, "Parent", date(2026, 3, 2), parent_task_id=grand.id)
    child = ts.create_task(schedule.id, "Child", date(2026, 3, 2), parent_task_id=parent.id)

    ts.delete_task(parent.id, child_policy=ChildPolicy.REPARENT_TO_GRANDPARENT)

    moved = ts.get_task(child.id)
    assert moved.parent_task_id == grand.id
    assert moved.wbs_code == "1.1"
    assert moved.level == 1


def _corrupt_parent_cycle(session, first_id, second_id):
    # bypass the hierarchy checks to simulate corrupted persisted data
    session.get(TaskORM, first_id).parent_task_id = second_id
    session.get(TaskORM, second_id).parent_task_id = first_id
    session.commit()


def test_parent_cycle_in_stored_data_is_reported_on_renumbering(services, schedule):
    ts = services["task_service"]
    session = services["session"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    _corrupt_parent_cycle(session, a.id, b.id)

    with pytest.raises(ScheduleIntegrityError) as exc:
        ts.create_task(schedule.id, "C", date(2026, 3, 2))
    assert exc.value.code == "HIERARCHY_CORRUPT"

    # nothing from the failed create was committed
    assert {t.title for t in ts.list_tasks(schedule.id)} == {"A", "B"}


def test_parent_cycle_in_stored_data_is_reported_on_reparent(services, schedule):
    ts = services["task_service"]
    session = services["session"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    c = ts.create_task(schedule.id, "C", date(2026, 3, 2))
    _corrupt_parent_cycle(session, a.id, b.id)

    with pytest.raises(ScheduleIntegrityError) as exc:
        ts.update_task(c.id, parent_task_id=a.id)
    assert exc.value.code == "HIERARCHY_CORRUPT"
    assert ts.get_task(c.id).parent_task_id is None

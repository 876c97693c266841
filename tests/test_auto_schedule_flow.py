from datetime import date, timedelta

import pytest

from schednet_core.exceptions import InvalidDateRangeError
from schednet_core.models import DependencyType, SchedulingMode


def _day(n: int) -> date:
    """Day 1 of the test calendar is 2026-03-02."""
    return date(2026, 3, 2) + timedelta(days=n - 1)


def _auto(ts, schedule_id, title, length, **kwargs):
    return ts.create_task(
        schedule_id,
        title,
        start_date=_day(20),
        end_date=_day(20 + length - 1),
        scheduling_mode=SchedulingMode.AUTO,
        **kwargs,
    )


def test_finish_to_start_places_successor_after_predecessor(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = _auto(ts, schedule.id, "B", 2)

    ts.add_dependency(a.id, b.id)

    moved = ts.get_task(b.id)
    assert moved.start_date == _day(4)
    assert moved.end_date == _day(5)
    assert moved.duration_days == 2


def test_finish_to_start_lag_pushes_successor(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = _auto(ts, schedule.id, "B", 2)

    ts.add_dependency(a.id, b.id, DependencyType.FINISH_TO_START, lag_days=2)

    assert ts.get_task(b.id).start_date == _day(6)


def test_start_to_start_lag(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = _auto(ts, schedule.id, "B", 3)

    ts.add_dependency(a.id, b.id, DependencyType.START_TO_START, lag_days=1)

    moved = ts.get_task(b.id)
    assert moved.start_date >= _day(2)
    assert moved.start_date == _day(2)
    assert moved.end_date == _day(4)


def test_finish_to_finish_aligns_last_days(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = _auto(ts, schedule.id, "B", 1)

    ts.add_dependency(a.id, b.id, DependencyType.FINISH_TO_FINISH)

    moved = ts.get_task(b.id)
    assert moved.end_date == _day(3)
    assert moved.start_date == _day(3)


def test_start_to_finish_ends_successor_before_predecessor_starts(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(5), _day(7))
    b = _auto(ts, schedule.id, "B", 2)

    ts.add_dependency(a.id, b.id, DependencyType.START_TO_FINISH)

    moved = ts.get_task(b.id)
    assert moved.start_date == _day(3)
    assert moved.end_date == _day(4)


def test_negative_lag_pulls_successor_earlier(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(5))
    b = _auto(ts, schedule.id, "B", 2)

    ts.add_dependency(a.id, b.id, lag_days=-2)

    assert ts.get_task(b.id).start_date == _day(4)


def test_latest_incoming_bound_wins(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(2))
    b = ts.create_task(schedule.id, "B", _day(1), _day(6))
    c = _auto(ts, schedule.id, "C", 1)

    ts.add_dependency(a.id, c.id)
    ts.add_dependency(b.id, c.id)

    assert ts.get_task(c.id).start_date == _day(7)


def test_milestone_successor_stays_zero_length(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    m = ts.create_task(
        schedule.id, "Gate", _day(10), is_milestone=True, scheduling_mode=SchedulingMode.AUTO
    )

    ts.add_dependency(a.id, m.id)

    gate = ts.get_task(m.id)
    assert gate.start_date == gate.end_date == _day(4)
    assert gate.duration_days == 0


def test_manual_successor_is_never_moved(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = ts.create_task(schedule.id, "B", _day(1), _day(1))

    ts.add_dependency(a.id, b.id)

    assert ts.get_task(b.id).start_date == _day(1)


def test_date_change_propagates_through_chain(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(2))
    b = _auto(ts, schedule.id, "B", 2)
    c = _auto(ts, schedule.id, "C", 3)
    ts.add_dependency(a.id, b.id)
    ts.add_dependency(b.id, c.id)
    assert ts.get_task(c.id).start_date == _day(5)

    ts.update_task(a.id, end_date=_day(4))

    assert ts.get_task(b.id).start_date == _day(5)
    assert ts.get_task(c.id).start_date == _day(7)
    assert ts.get_task(c.id).end_date == _day(9)


def test_switching_to_auto_snaps_task_to_its_constraints(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = ts.create_task(schedule.id, "B", _day(1), _day(2))
    ts.add_dependency(a.id, b.id)
    assert ts.get_task(b.id).start_date == _day(1)

    ts.update_task(b.id, scheduling_mode=SchedulingMode.AUTO)

    snapped = ts.get_task(b.id)
    assert snapped.start_date == _day(4)
    assert snapped.end_date == _day(5)
    assert snapped.scheduling_mode == SchedulingMode.AUTO


def test_schedule_all_is_idempotent(services, schedule):
    ts = services["task_service"]
    engine = services["scheduling_engine"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = _auto(ts, schedule.id, "B", 2)
    c = _auto(ts, schedule.id, "C", 2)
    ts.add_dependency(a.id, b.id)
    ts.add_dependency(a.id, c.id, DependencyType.START_TO_START, lag_days=1)

    before = {t.id: (t.start_date, t.end_date) for t in ts.list_tasks(schedule.id)}
    first = engine.auto_schedule_all(schedule.id)
    second = engine.auto_schedule_all(schedule.id)
    after = {t.id: (t.start_date, t.end_date) for t in ts.list_tasks(schedule.id)}

    assert first.changed_task_ids == []
    assert second.changed_task_ids == []
    assert before == after


def test_auto_schedule_task_keeps_the_anchor(services, schedule):
    ts = services["task_service"]
    engine = services["scheduling_engine"]

    a = _auto(ts, schedule.id, "A", 2)
    b = _auto(ts, schedule.id, "B", 2)
    ts.add_dependency(a.id, b.id)

    result = engine.auto_schedule_task(a.id)

    assert result.scope[0] == a.id
    assert set(result.scope) == {a.id, b.id}
    assert ts.get_task(a.id).start_date == _day(20)
    assert ts.get_task(b.id).start_date == _day(22)


def test_deleting_the_only_edge_leaves_successor_in_place(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    b = _auto(ts, schedule.id, "B", 2)
    dep = ts.add_dependency(a.id, b.id, lag_days=5)
    assert ts.get_task(b.id).start_date == _day(9)

    ts.delete_dependency(dep.id)

    assert ts.get_task(b.id).start_date == _day(9)


def test_deleting_binding_edge_relaxes_successor_to_remaining_bound(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", _day(1), _day(2))
    b = ts.create_task(schedule.id, "B", _day(1), _day(6))
    c = _auto(ts, schedule.id, "C", 1)
    ts.add_dependency(a.id, c.id)
    binding = ts.add_dependency(b.id, c.id)
    assert ts.get_task(c.id).start_date == _day(7)

    ts.delete_dependency(binding.id)

    assert ts.get_task(c.id).start_date == _day(3)


def test_invalid_dates_are_rejected_before_any_write(services, schedule):
    ts = services["task_service"]

    with pytest.raises(InvalidDateRangeError):
        ts.create_task(schedule.id, "Backwards", _day(5), _day(4))
    with pytest.raises(InvalidDateRangeError):
        ts.create_task(schedule.id, "Long milestone", _day(5), _day(6), is_milestone=True)

    a = ts.create_task(schedule.id, "A", _day(1), _day(3))
    with pytest.raises(InvalidDateRangeError):
        ts.update_task(a.id, end_date=_day(0))

    assert ts.get_task(a.id).end_date == _day(3)
    assert [t.title for t in ts.list_tasks(schedule.id)] == ["A"]

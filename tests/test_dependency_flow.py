from datetime import date

import pytest

from schednet_core.exceptions import (
    BusinessRuleError,
    CyclicDependencyError,
    DuplicateDependencyError,
    SelfDependencyError,
    UnknownDependencyError,
    UnknownTaskError,
    ValidationError,
)
from schednet_core.models import DependencyType


def test_add_and_list_dependencies(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    c = ts.create_task(schedule.id, "C", date(2026, 3, 2))

    ab = ts.add_dependency(a.id, b.id)
    bc = ts.add_dependency(b.id, c.id, DependencyType.START_TO_START, lag_days=-1)

    assert ab.dependency_type == DependencyType.FINISH_TO_START
    assert ab.lag_days == 0
    assert {d.id for d in ts.list_dependencies_for_task(b.id)} == {ab.id, bc.id}
    assert [d.id for d in ts.list_dependencies_for_task(c.id)] == [bc.id]
    assert ts.list_dependencies_for_task(c.id)[0].lag_days == -1


def test_self_duplicate_and_unknown_endpoints_are_rejected(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    ts.add_dependency(a.id, b.id)

    with pytest.raises(SelfDependencyError):
        ts.add_dependency(a.id, a.id)
    with pytest.raises(DuplicateDependencyError):
        ts.add_dependency(a.id, b.id, DependencyType.START_TO_START)
    with pytest.raises(UnknownTaskError):
        ts.add_dependency(a.id, "missing")

    assert len(ts.list_dependencies_for_task(a.id)) == 1


def test_cycle_is_rejected_and_nothing_is_written(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    c = ts.create_task(schedule.id, "C", date(2026, 3, 2))
    ts.add_dependency(a.id, b.id)
    ts.add_dependency(b.id, c.id)

    with pytest.raises(CyclicDependencyError) as exc:
        ts.add_dependency(c.id, a.id)
    assert isinstance(exc.value, BusinessRuleError)
    assert exc.value.code == "DEPENDENCY_CYCLE"

    assert [d.successor_task_id for d in ts.list_dependencies_for_task(c.id)] == [c.id]


def test_cross_schedule_dependency_is_rejected(services, schedule):
    ts = services["task_service"]
    other = services["schedule_service"].create_schedule("Other")

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(other.id, "B", date(2026, 3, 2))

    with pytest.raises(ValidationError) as exc:
        ts.add_dependency(a.id, b.id)
    assert exc.value.code == "DEPENDENCY_CROSS_SCHEDULE"


def test_non_integer_lag_is_rejected(services, schedule):
    ts = services["task_service"]
    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))

    with pytest.raises(ValidationError) as exc:
        ts.add_dependency(a.id, b.id, lag_days=1.5)
    assert exc.value.code == "DEPENDENCY_INVALID_LAG"


def test_delete_dependency(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    dep = ts.add_dependency(a.id, b.id)

    ts.delete_dependency(dep.id)
    assert ts.list_dependencies_for_task(a.id) == []

    with pytest.raises(UnknownDependencyError):
        ts.delete_dependency(dep.id)

    # the edge is gone, so the reverse direction is now legal
    ts.add_dependency(b.id, a.id)


def test_delete_task_detaches_its_edges(services, schedule):
    ts = services["task_service"]

    a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
    b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
    c = ts.create_task(schedule.id, "C", date(2026, 3, 2))
    ts.add_dependency(a.id, b.id)
    ts.add_dependency(b.id, c.id)

    ts.delete_task(b.id)

    assert ts.list_dependencies_for_task(a.id) == []
    assert ts.list_dependencies_for_task(c.id) == []

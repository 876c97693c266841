from datetime import date
import weakref

import pytest

from schednet_core.events.domain_events import domain_events
from schednet_core.events.signal import Signal
from schednet_core.exceptions import CyclicDependencyError


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(schedule_id: str) -> None:
        seen.append(schedule_id)

    domain_events.schedule_changed.connect(_handler)
    domain_events.schedule_changed.emit("s-1")
    domain_events.schedule_changed.disconnect(_handler)
    domain_events.schedule_changed.emit("s-2")

    assert seen == ["s-1"]


def test_signal_emit_prunes_dead_weak_proxies():
    signal: Signal[str] = Signal()
    seen: list[str] = []

    class _Listener:
        def __call__(self, payload: str) -> None:
            seen.append(payload)

    listener = _Listener()
    signal.connect(weakref.proxy(listener))
    signal.emit("s-1")
    del listener
    signal.emit("s-2")

    assert seen == ["s-1"]
    assert signal.subscriber_count() == 0


def test_signal_emit_keeps_other_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)
    with pytest.raises(RuntimeError, match="boom"):
        signal.emit("s-1")
    assert signal.subscriber_count() == 1


def test_services_emit_after_commit_only(services, schedule):
    ts = services["task_service"]
    engine = services["scheduling_engine"]
    tasks_seen: list[str] = []
    deps_seen: list[str] = []
    cpm_seen: list[str] = []

    domain_events.tasks_changed.connect(tasks_seen.append)
    domain_events.dependencies_changed.connect(deps_seen.append)
    domain_events.critical_path_changed.connect(cpm_seen.append)
    try:
        a = ts.create_task(schedule.id, "A", date(2026, 3, 2))
        b = ts.create_task(schedule.id, "B", date(2026, 3, 2))
        ts.add_dependency(a.id, b.id)
        deps_before = len(deps_seen)

        with pytest.raises(CyclicDependencyError):
            ts.add_dependency(b.id, a.id)
        assert len(deps_seen) == deps_before

        engine.calculate_critical_path(schedule.id)
    finally:
        domain_events.tasks_changed.disconnect(tasks_seen.append)
        domain_events.dependencies_changed.disconnect(deps_seen.append)
        domain_events.critical_path_changed.disconnect(cpm_seen.append)

    assert tasks_seen[:2] == [schedule.id, schedule.id]
    assert deps_seen == [schedule.id]
    assert cpm_seen == [schedule.id]

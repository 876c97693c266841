""" Track changes in schedules, tasks, dependencies and critical-path results """
from schednet_core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.schedule_changed: Signal[str] = Signal()       # schedule_id
        self.tasks_changed: Signal[str] = Signal()          # schedule_id
        self.dependencies_changed: Signal[str] = Signal()   # schedule_id
        self.critical_path_changed: Signal[str] = Signal()  # schedule_id


# SINGLE global instance
domain_events = DomainEvents()

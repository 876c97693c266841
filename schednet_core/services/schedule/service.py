from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from schednet_core.events.domain_events import domain_events
from schednet_core.exceptions import ConcurrencyError, InvalidDateRangeError, UnknownScheduleError, ValidationError
from schednet_core.interfaces import ScheduleRepository
from schednet_core.models import Schedule
from schednet_core.services.common.locks import ScheduleLockRegistry, schedule_locks

logger = logging.getLogger(__name__)


class ScheduleService:
    """Owns the schedule container records that tasks hang off."""

    def __init__(
        self,
        session: Session,
        schedule_repo: ScheduleRepository,
        locks: Optional[ScheduleLockRegistry] = None,
    ):
        self._session: Session = session
        self._schedule_repo: ScheduleRepository = schedule_repo
        self._locks: ScheduleLockRegistry = locks if locks is not None else schedule_locks

    def create_schedule(
        self,
        name: str,
        schedule_start_date: date | None = None,
        schedule_end_date: date | None = None,
    ) -> Schedule:
        self._validate_schedule_name(name)
        self._validate_window(schedule_start_date, schedule_end_date)
        schedule = Schedule.create(
            name=name.strip(),
            schedule_start_date=schedule_start_date,
            schedule_end_date=schedule_end_date,
        )
        try:
            self._schedule_repo.add(schedule)
            self._session.commit()
            logger.info("Created schedule %s - %s", schedule.id, schedule.name)
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating schedule: %s", e)
            raise
        domain_events.schedule_changed.emit(schedule.id)
        return schedule

    def get_schedule(self, schedule_id: str) -> Schedule:
        schedule = self._schedule_repo.get(schedule_id)
        if not schedule:
            raise UnknownScheduleError("Schedule not found.", code="SCHEDULE_NOT_FOUND")
        return schedule

    def update_schedule(
        self,
        schedule_id: str,
        name: str | None = None,
        schedule_start_date: date | None = None,
        schedule_end_date: date | None = None,
        expected_version: int | None = None,
    ) -> Schedule:
        schedule = self.get_schedule(schedule_id)
        if expected_version is not None and schedule.version != expected_version:
            raise ConcurrencyError(
                "Schedule changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        if name is not None:
            self._validate_schedule_name(name)
            schedule.name = name.strip()
        if schedule_start_date is not None:
            schedule.schedule_start_date = schedule_start_date
        if schedule_end_date is not None:
            schedule.schedule_end_date = schedule_end_date
        self._validate_window(schedule.schedule_start_date, schedule.schedule_end_date)

        try:
            schedule.version = self._schedule_repo.update(schedule)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error updating schedule %s: %s", schedule_id, e)
            raise
        domain_events.schedule_changed.emit(schedule.id)
        return schedule

    def list_schedules(self, include_archived: bool = False) -> List[Schedule]:
        return self._schedule_repo.list_all(include_archived=include_archived)

    def archive_schedule(self, schedule_id: str, expected_version: int | None = None) -> Schedule:
        """
        Hide a schedule from the default listing. Its tasks stay untouched and
        can still be edited; archiving is only a listing filter.
        """
        schedule = self.get_schedule(schedule_id)
        if expected_version is not None and schedule.version != expected_version:
            raise ConcurrencyError(
                "Schedule changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        if schedule.is_archived:
            return schedule

        schedule.is_archived = True
        try:
            schedule.version = self._schedule_repo.update(schedule)
            self._session.commit()
            logger.info("Archived schedule %s - %s", schedule.id, schedule.name)
        except Exception as e:
            self._session.rollback()
            logger.error("Error archiving schedule %s: %s", schedule_id, e)
            raise
        domain_events.schedule_changed.emit(schedule.id)
        return schedule

    def delete_schedule(self, schedule_id: str) -> None:
        """Delete a schedule with all of its tasks and dependencies."""
        self.get_schedule(schedule_id)
        with self._locks.hold(schedule_id):
            try:
                self._schedule_repo.delete(schedule_id)
                self._session.commit()
                logger.info("Deleted schedule %s", schedule_id)
            except Exception as e:
                self._session.rollback()
                logger.error("Error deleting schedule %s: %s", schedule_id, e)
                raise
        domain_events.schedule_changed.emit(schedule_id)
        domain_events.tasks_changed.emit(schedule_id)
        domain_events.dependencies_changed.emit(schedule_id)

    @staticmethod
    def _validate_schedule_name(name: str) -> None:
        if not (name or "").strip():
            raise ValidationError("Schedule name cannot be empty.", code="SCHEDULE_NAME_EMPTY")

    @staticmethod
    def _validate_window(start: date | None, end: date | None) -> None:
        if start and end and end < start:
            raise InvalidDateRangeError(
                "Schedule end date cannot be before its start date.",
                code="SCHEDULE_INVALID_DATE",
            )


__all__ = ["ScheduleService"]

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from schednet_core.exceptions import ConcurrencyError, DomainError
from schednet_core.interfaces import DependencyRepository, ScheduleRepository, TaskRepository
from schednet_core.services.common.locks import ScheduleLockRegistry, schedule_locks
from schednet_core.services.scheduling.budget import PassBudget
from schednet_core.services.scheduling.store import TaskStore


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3


class ScheduleTransaction:
    """
    Runs one engine operation against a schedule as a single unit:
    lock -> load TaskStore -> work -> flush -> bump schedule version -> commit.

    Any exception rolls the session back, so nothing is partially committed.
    A stale schedule version (another writer committed in between) reloads
    and reruns the whole operation, up to max_retries attempts.
    """

    def __init__(
        self,
        session: Session,
        schedule_repo: ScheduleRepository,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        locks: Optional[ScheduleLockRegistry] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout_seconds: Optional[float] = None,
    ):
        self._session: Session = session
        self._schedule_repo: ScheduleRepository = schedule_repo
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._locks: ScheduleLockRegistry = locks if locks is not None else schedule_locks
        self._max_retries: int = max(1, int(max_retries))
        self._timeout_seconds: Optional[float] = timeout_seconds

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def timeout_seconds(self) -> Optional[float]:
        return self._timeout_seconds

    def run(
        self,
        schedule_id: str,
        work: Callable[[TaskStore, PassBudget], T],
        *,
        action: str,
    ) -> T:
        budget = PassBudget(self._timeout_seconds)
        with self._locks.hold(schedule_id, self._timeout_seconds):
            attempt = 0
            while True:
                attempt += 1
                try:
                    store = TaskStore.load(
                        schedule_id, self._schedule_repo, self._task_repo, self._dependency_repo
                    )
                    outcome = work(store, budget)
                    if store.has_pending_changes():
                        store.flush(self._task_repo, self._dependency_repo)
                        store.schedule.version = self._schedule_repo.bump_version(
                            schedule_id, store.schedule.version
                        )
                    self._session.commit()
                    logger.info(f"{action} committed for schedule {schedule_id}")
                    return outcome
                except ConcurrencyError as exc:
                    self._session.rollback()
                    if exc.code != "SCHEDULE_STALE" or attempt >= self._max_retries:
                        logger.error(f"{action} rejected for schedule {schedule_id}: {exc}")
                        raise
                    logger.warning(
                        f"{action} hit a concurrent write on schedule {schedule_id}; "
                        f"retrying ({attempt}/{self._max_retries})"
                    )
                except DomainError as exc:
                    self._session.rollback()
                    logger.warning(f"{action} rejected for schedule {schedule_id}: [{exc.code}] {exc}")
                    raise
                except Exception as exc:
                    self._session.rollback()
                    logger.error(f"{action} failed for schedule {schedule_id}: {exc}")
                    raise


__all__ = ["ScheduleTransaction", "DEFAULT_MAX_RETRIES"]

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from schednet_core.services.common.locks import ScheduleLockRegistry
from schednet_core.services.common.transaction import DEFAULT_MAX_RETRIES, ScheduleTransaction
from schednet_core.services.schedule import ScheduleService
from schednet_core.services.scheduling import SchedulingEngine
from schednet_core.services.task import TaskService
from schednet_infra.db.base import SessionLocal
from schednet_infra.db.repositories import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyScheduleRepository,
    SqlAlchemyTaskRepository,
)
from schednet_infra.migrate import run_migrations
from schednet_infra.path import default_db_url

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return default


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    schedule_service: ScheduleService
    task_service: TaskService
    scheduling_engine: SchedulingEngine

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "schedule_service": self.schedule_service,
            "task_service": self.task_service,
            "scheduling_engine": self.scheduling_engine,
        }


def build_service_graph(
    session: Session,
    *,
    max_retries: Optional[int] = None,
    timeout_seconds: Optional[float] = None,
    locks: Optional[ScheduleLockRegistry] = None,
) -> ServiceGraph:
    """
    Wire repositories and services around one session. Explicit arguments win
    over SCHEDNET_MAX_RETRIES / SCHEDNET_PASS_TIMEOUT_SECONDS.
    """
    if max_retries is None:
        max_retries = _env_int("SCHEDNET_MAX_RETRIES", DEFAULT_MAX_RETRIES)
    if timeout_seconds is None:
        timeout_seconds = _env_float("SCHEDNET_PASS_TIMEOUT_SECONDS")

    schedule_repo = SqlAlchemyScheduleRepository(session)
    task_repo = SqlAlchemyTaskRepository(session)
    dependency_repo = SqlAlchemyDependencyRepository(session)

    transaction = ScheduleTransaction(
        session,
        schedule_repo,
        task_repo,
        dependency_repo,
        locks=locks,
        max_retries=max_retries,
        timeout_seconds=timeout_seconds,
    )
    return ServiceGraph(
        session=session,
        schedule_service=ScheduleService(session, schedule_repo, locks=locks),
        task_service=TaskService(session, schedule_repo, task_repo, dependency_repo, transaction),
        scheduling_engine=SchedulingEngine(task_repo, transaction),
    )


def build_services(session: Optional[Session] = None, **overrides: Any) -> dict[str, Any]:
    """
    Service dict for callers. Without a session, migrates the SCHEDNET_DB_URL
    database (a SQLite file under the user data dir by default) and opens one.
    """
    if session is None:
        run_migrations(default_db_url())
        session = SessionLocal()
    return build_service_graph(session, **overrides).as_dict()


__all__ = ["ServiceGraph", "build_service_graph", "build_services"]

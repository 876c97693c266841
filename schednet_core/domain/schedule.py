from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from schednet_core.domain.identifiers import generate_id


@dataclass
class Schedule:
    """
    Container for one task network.

    The start/end window is display context only; the engine never clamps
    task placement to it.
    """
    id: str
    name: str
    schedule_start_date: Optional[date] = None
    schedule_end_date: Optional[date] = None
    version: int = 1
    is_archived: bool = False

    @staticmethod
    def create(name: str, **extra) -> "Schedule":
        return Schedule(id=generate_id(), name=name, **extra)


__all__ = ["Schedule"]

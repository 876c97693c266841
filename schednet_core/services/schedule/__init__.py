from .service import ScheduleService

__all__ = ["ScheduleService"]

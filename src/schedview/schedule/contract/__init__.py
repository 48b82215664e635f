"""Schedule result contract models (Pydantic schemas)."""

from .models import OrderPlan, ResultMeta, SchedulePayload, ScheduleResultResponse, TaskPlan

__all__ = [
    "TaskPlan",
    "OrderPlan",
    "SchedulePayload",
    "ResultMeta",
    "ScheduleResultResponse",
]

"""Pydantic models describing the schedule result payload.

Field aliases mirror the scheduling backend's JSON keys exactly, including the
ones that contain spaces (``"order code"``, ``"team name"`` ...). Dump with
``by_alias=True`` to reproduce the wire format.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schedview.core.timestamps import parse_timestamp

__all__ = [
    "TaskPlan",
    "OrderPlan",
    "SchedulePayload",
    "ResultMeta",
    "ScheduleResultResponse",
]

_WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)


class TaskPlan(BaseModel):
    """One scheduled operation with its planned span and assignment.

    Attributes
    ----------
    order_code / order_name:
        Order the task belongs to (``"order code"``, ``order_name``).
    product_code / product_name:
        Optional product within the order.
    task_id:
        Unique task identifier (``"task id"``).
    task_code / process_code / name:
        Task and process codes plus the display name.
    planstart / planend:
        ISO-8601 timestamps as delivered; see :attr:`start` and :attr:`end`.
    team_id / team_code / team_name:
        Assigned team (``"team id"``, ``team_code``, ``"team name"``).
    station_id / station_code / station_name:
        Assigned station (``"station id"``, ``"station code"``, ``"station name"``).
    machine_id / machine_code / machine_name:
        Optional machine assignment.
    """

    model_config = _WIRE_CONFIG

    order_code: str = Field(alias="order code")
    order_name: str = ""
    product_code: str | None = None
    product_name: str | None = None
    task_id: str = Field(alias="task id")
    task_code: str = ""
    process_code: str = ""
    name: str = ""
    planstart: str | None = None
    planend: str | None = None
    team_id: str | None = Field(default=None, alias="team id")
    team_code: str
    team_name: str = Field(default="", alias="team name")
    station_id: str | None = Field(default=None, alias="station id")
    station_code: str = Field(alias="station code")
    station_name: str = Field(default="", alias="station name")
    machine_id: str | None = Field(default=None, alias="machine id")
    machine_code: str | None = Field(default=None, alias="machine code")
    machine_name: str | None = Field(default=None, alias="machine name")

    @property
    def start(self) -> datetime | None:
        """Parsed planned start, ``None`` when missing or unparsable."""
        return parse_timestamp(self.planstart)

    @property
    def end(self) -> datetime | None:
        """Parsed planned end, ``None`` when missing or unparsable."""
        return parse_timestamp(self.planend)


class OrderPlan(BaseModel):
    """Order-level envelope of its tasks."""

    model_config = _WIRE_CONFIG

    order_code: str = Field(alias="Order code")
    order_name: str = Field(default="", alias="Order name")
    planstart: str | None = None
    planend: str | None = None


class SchedulePayload(BaseModel):
    """One immutable schedule result snapshot.

    Attributes
    ----------
    best_order_sequence:
        Externally chosen execution priority of order codes (may be empty).
    product_order_plan:
        Order envelopes in delivery order.
    task_plan:
        Flat task list.
    """

    model_config = ConfigDict(frozen=True)

    best_order_sequence: tuple[str, ...] = ()
    product_order_plan: tuple[OrderPlan, ...] = ()
    task_plan: tuple[TaskPlan, ...] = ()


class ResultMeta(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    last_modified: str | None = Field(default=None, alias="lastModified")
    file_size: int | None = Field(default=None, alias="fileSize")


class ScheduleResultResponse(BaseModel):
    """API envelope wrapping a payload (``{"status", "data", "meta"}``)."""

    model_config = ConfigDict(frozen=True)

    status: str
    data: SchedulePayload
    meta: ResultMeta | None = None

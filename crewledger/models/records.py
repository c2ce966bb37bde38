from __future__ import annotations

import math
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

ApprovalStatus = Literal["pending", "approved", "rejected"]

CLOCK_EVENT_KINDS = {
    "start": "start",
    "start-of-day": "start",
    "start_of_day": "start",
    "clock_in": "start",
    "end": "end",
    "end-of-day": "end",
    "end_of_day": "end",
    "clock_out": "end",
}


def _lenient_float(value) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


class LaborSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_id: str = Field(alias="workerId")
    worker_display_name: str = Field(default="", alias="workerDisplayName")
    company_name: str = Field(default="", alias="companyName")
    project_name: str = Field(default="", alias="projectName")
    date: date
    hours_claimed: float = Field(default=0.0, alias="hoursClaimed")
    approval_status: ApprovalStatus = Field(default="pending", alias="approvalStatus")

    @field_validator("hours_claimed", mode="before")
    @classmethod
    def _coerce_hours(cls, value) -> float:
        return _lenient_float(value)

    @field_validator("approval_status", mode="before")
    @classmethod
    def _normalise_status(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("worker_display_name", "company_name", "project_name", mode="before")
    @classmethod
    def _blank_if_missing(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value


class ClockEvent(BaseModel):
    """A start or end-of-day punch. Unparseable timestamps are kept as ``None``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_id: str = Field(alias="workerId")
    date: date
    kind: str
    timestamp: Optional[datetime] = None
    reporter_display_name: Optional[str] = Field(default=None, alias="reporterDisplayName")
    company_name: Optional[str] = Field(default=None, alias="companyName")

    @field_validator("kind", mode="before")
    @classmethod
    def _normalise_kind(cls, value) -> str:
        raw = str(value or "").strip().lower()
        return CLOCK_EVENT_KINDS.get(raw, raw)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value, info: ValidationInfo):
        if value is None or isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        raw = value.strip()
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            pass
        work_date = info.data.get("date")
        if work_date is None:
            return None
        try:
            return datetime.combine(work_date, datetime.strptime(raw, "%H:%M").time())
        except ValueError:
            return None


class RateEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_id: str = Field(alias="workerId")
    hourly_rate: float = Field(default=0.0, alias="hourlyRate")

    @field_validator("hourly_rate", mode="before")
    @classmethod
    def _coerce_rate(cls, value) -> float:
        return _lenient_float(value)


class ContractBudget(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    company_name: str = Field(alias="companyName")
    total_amount: float = Field(default=0.0, alias="totalAmount")

    @field_validator("total_amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value) -> float:
        return _lenient_float(value)


class WorkerProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_id: str = Field(alias="workerId")
    display_name: str = Field(alias="displayName")
    company_name: Optional[str] = Field(default=None, alias="companyName")

from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ReconciliationStatus = Literal["pass", "mismatch", "incomplete"]


class ReconciliationRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_id: str = Field(alias="workerId")
    date: date
    display_name: str = Field(alias="displayName")
    start_time: Optional[datetime] = Field(default=None, alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")
    calculated_hours: float = Field(default=0.0, alias="calculatedHours")
    submitted_hours: float = Field(default=0.0, alias="submittedHours")
    difference: Optional[float] = Field(default=None, description="Absolute hours difference when both sides exist")
    status: ReconciliationStatus
    duplicate_events: int = Field(default=0, alias="duplicateEvents")
    has_submission: bool = Field(default=False, alias="hasSubmission")
    approval_status: Optional[str] = Field(default=None, alias="approvalStatus")


class ReconciliationSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    total: int = 0
    passed: int = Field(default=0, alias="pass")
    mismatch: int = 0
    incomplete: int = 0


class VerificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    date_from: date = Field(alias="dateFrom")
    date_to: date = Field(alias="dateTo")
    company: Optional[str] = None
    records: List[ReconciliationRecord]
    summary: ReconciliationSummary
    generated_at: datetime = Field(alias="generatedAt")

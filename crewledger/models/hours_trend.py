from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TrendPeriod = Literal["daily", "weekly", "monthly"]


class HoursTrendPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    period_start: date = Field(alias="periodStart")
    total_hours: float = Field(default=0.0, alias="totalHours")
    unique_workers: int = Field(default=0, alias="uniqueWorkers")
    entries_count: int = Field(default=0, alias="entriesCount")
    avg_hours_per_worker: float = Field(default=0.0, alias="avgHoursPerWorker")


class HoursTrendPeak(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    period_start: Optional[date] = Field(default=None, alias="periodStart")
    hours: float = 0.0
    workers: int = 0


class HoursTrendSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    total_hours: float = Field(default=0.0, alias="totalHours")
    avg_hours_per_period: float = Field(default=0.0, alias="avgHoursPerPeriod")
    peak: HoursTrendPeak = Field(default_factory=HoursTrendPeak)
    periods: int = 0
    max_unique_workers: int = Field(default=0, alias="maxUniqueWorkers")


class HoursTrend(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    period: TrendPeriod
    points: List[HoursTrendPoint] = Field(default_factory=list)
    summary: HoursTrendSummary = Field(default_factory=HoursTrendSummary)


class HoursTrendResponse(HoursTrend):
    date_from: date = Field(alias="dateFrom")
    date_to: date = Field(alias="dateTo")
    company: Optional[str] = None
    generated_at: datetime = Field(alias="generatedAt")

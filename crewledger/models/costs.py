from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CostEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_id: str = Field(alias="workerId")
    worker_name: str = Field(alias="workerName")
    company_name: str = Field(alias="companyName")
    project_name: str = Field(alias="projectName")
    date: date
    hours: float
    hourly_rate: float = Field(alias="hourlyRate")
    cost: float
    rate_missing: bool = Field(default=False, alias="rateMissing")


class WorkerCostRollup(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    worker_name: str = Field(alias="workerName")
    company_name: str = Field(alias="companyName")
    hours: float = 0.0
    cost: float = 0.0
    entries_count: int = Field(default=0, alias="entriesCount")
    project_names: List[str] = Field(default_factory=list, alias="projectNames")
    latest_date: Optional[date] = Field(default=None, alias="latestDate")


class CompanyCostRollup(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    company_name: str = Field(alias="companyName")
    hours: float = 0.0
    cost: float = 0.0
    workers: List[str] = Field(default_factory=list)
    worker_count: int = Field(default=0, alias="workerCount")


class ProjectCostRollup(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    project_name: str = Field(alias="projectName")
    hours: float = 0.0
    cost: float = 0.0
    entries_count: int = Field(default=0, alias="entriesCount")


class CostAggregates(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    entries: List[CostEntry] = Field(default_factory=list)
    by_worker: List[WorkerCostRollup] = Field(default_factory=list, alias="byWorker")
    by_company: List[CompanyCostRollup] = Field(default_factory=list, alias="byCompany")
    by_project: List[ProjectCostRollup] = Field(default_factory=list, alias="byProject")
    total_hours: float = Field(default=0.0, alias="totalHours")
    total_cost: float = Field(default=0.0, alias="totalCost")
    missing_rate_workers: List[str] = Field(default_factory=list, alias="missingRateWorkers")


class CostReportResponse(CostAggregates):
    date_from: date = Field(alias="dateFrom")
    date_to: date = Field(alias="dateTo")
    company: Optional[str] = None
    order_by: Literal["cost", "hours", "name"] = Field(default="cost", alias="orderBy")
    generated_at: datetime = Field(alias="generatedAt")

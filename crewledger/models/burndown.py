from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

BurndownStatus = Literal["behind", "on_track", "ahead"]


class BurndownPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    date: date
    day_index: int = Field(alias="dayIndex")
    ideal_remaining: float = Field(alias="idealRemaining")
    actual_remaining: float = Field(alias="actualRemaining")
    daily_cost: float = Field(alias="dailyCost", description="Spend accrued since the previous emitted point")
    accumulated_cost: float = Field(alias="accumulatedCost")
    contract_amount: float = Field(alias="contractAmount")


class BurndownResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    company: str
    date_from: date = Field(alias="dateFrom")
    date_to: date = Field(alias="dateTo")
    contract_amount: float = Field(default=0.0, alias="contractAmount")
    total_days: int = Field(alias="totalDays")
    sample_interval: int = Field(alias="sampleInterval")
    range_too_large: bool = Field(default=False, alias="rangeTooLarge")
    status: Optional[BurndownStatus] = None
    points: List[BurndownPoint] = Field(default_factory=list)
    generated_at: datetime = Field(alias="generatedAt")

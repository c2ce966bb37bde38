from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import settings
from ..models import CostReportResponse, HoursTrendResponse
from ..repos.labor_repo import LaborRepo
from ..services.hours_trend import TREND_PERIODS
from ..services.reporting import (
    COST_DEFAULT_DAYS,
    COST_ORDERINGS,
    build_cost_report,
    build_hours_trend_report,
    resolve_window,
)

logger = logging.getLogger(__name__)


def _ensure_feature_enabled() -> None:
    if not settings.feature_cost_burndown:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cost reporting is disabled")


def get_repo() -> LaborRepo:
    return LaborRepo()


class CostQuery(BaseModel):
    order_by: str = Field("cost", alias="orderBy")

    @field_validator("order_by")
    @classmethod
    def _validate_order_by(cls, value: str) -> str:
        order_by = value.strip().lower()
        if order_by not in COST_ORDERINGS:
            raise ValueError(f"orderBy must be one of {', '.join(COST_ORDERINGS)}")
        return order_by


class TrendQuery(BaseModel):
    period: str = "daily"

    @field_validator("period")
    @classmethod
    def _validate_period(cls, value: str) -> str:
        period = value.strip().lower()
        if period not in TREND_PERIODS:
            raise ValueError(f"period must be one of {', '.join(TREND_PERIODS)}")
        return period


router = APIRouter(prefix="/api/v1/costs", tags=["costs"])


@router.get("", response_model=CostReportResponse)
def cost_report(
    response: Response,
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    company: Optional[str] = Query(default=None),
    order_by: str = Query(default="cost", alias="orderBy"),
    repo: LaborRepo = Depends(get_repo),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> CostReportResponse:
    _ensure_feature_enabled()
    try:
        query = CostQuery(orderBy=order_by)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.errors(include_context=False)) from exc
    start, end = resolve_window(date_from, date_to, COST_DEFAULT_DAYS)
    try:
        report = build_cost_report(repo, start, end, company, query.order_by)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    response.headers["Cache-Control"] = "private, max-age=30"
    logger.info(
        "cost_report date_from=%s date_to=%s company=%s entries=%s total_cost=%.2f request_id=%s",
        start,
        end,
        report.company,
        len(report.entries),
        report.total_cost,
        x_request_id,
    )
    return report


@router.get("/hours-over-time", response_model=HoursTrendResponse)
def hours_over_time_report(
    response: Response,
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    company: Optional[str] = Query(default=None),
    period: str = Query(default="daily"),
    repo: LaborRepo = Depends(get_repo),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> HoursTrendResponse:
    _ensure_feature_enabled()
    try:
        query = TrendQuery(period=period)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.errors(include_context=False)) from exc
    start, end = resolve_window(date_from, date_to, COST_DEFAULT_DAYS)
    try:
        report = build_hours_trend_report(repo, start, end, company, query.period)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    response.headers["Cache-Control"] = "private, max-age=30"
    logger.info(
        "hours_over_time period=%s points=%s request_id=%s",
        report.period,
        len(report.points),
        x_request_id,
    )
    return report

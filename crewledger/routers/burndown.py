from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import settings
from ..models import BurndownResponse, ExportTable
from ..repos.labor_repo import LaborRepo
from ..services.export import burndown_table
from ..services.reporting import BURNDOWN_DEFAULT_DAYS, build_burndown_report, resolve_window

logger = logging.getLogger(__name__)


def _ensure_feature_enabled() -> None:
    if not settings.feature_cost_burndown:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cost burndown is disabled")


def get_repo() -> LaborRepo:
    return LaborRepo()


class BurndownQuery(BaseModel):
    company: Optional[str] = Field(default=None, description="Company whose contract budget is burned down")

    @field_validator("company")
    @classmethod
    def _validate_company(cls, value: Optional[str]) -> str:
        if not value or not value.strip():
            raise ValueError("company is required")
        return value.strip()


def _load_report(
    repo: LaborRepo,
    company: Optional[str],
    date_from: Optional[str],
    date_to: Optional[str],
) -> BurndownResponse:
    try:
        query = BurndownQuery(company=company)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.errors(include_context=False)) from exc
    start, end = resolve_window(date_from, date_to, BURNDOWN_DEFAULT_DAYS)
    try:
        return build_burndown_report(repo, query.company, start, end)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


router = APIRouter(prefix="/api/v1/burndown", tags=["burndown"])


@router.get("", response_model=BurndownResponse)
def burndown_report(
    response: Response,
    company: Optional[str] = Query(default=None),
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    repo: LaborRepo = Depends(get_repo),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> BurndownResponse:
    _ensure_feature_enabled()
    report = _load_report(repo, company, date_from, date_to)
    response.headers["Cache-Control"] = "private, max-age=30"
    logger.info(
        "burndown_report company=%s total_days=%s points=%s range_too_large=%s status=%s request_id=%s",
        report.company,
        report.total_days,
        len(report.points),
        report.range_too_large,
        report.status,
        x_request_id,
    )
    return report


@router.get("/export", response_model=ExportTable)
def burndown_export(
    company: Optional[str] = Query(default=None),
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    repo: LaborRepo = Depends(get_repo),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> ExportTable:
    _ensure_feature_enabled()
    report = _load_report(repo, company, date_from, date_to)
    table = burndown_table(report.points)
    logger.info("burndown_export company=%s rows=%s request_id=%s", report.company, len(table.rows), x_request_id)
    return table

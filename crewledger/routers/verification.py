from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status

from ..config import settings
from ..models import ExportTable, VerificationResponse
from ..repos.labor_repo import LaborRepo
from ..services.export import verification_table
from ..services.reporting import VERIFICATION_DEFAULT_DAYS, build_verification_report, resolve_window

logger = logging.getLogger(__name__)


def _ensure_feature_enabled() -> None:
    if not settings.feature_time_verification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time verification is disabled")


def get_repo() -> LaborRepo:
    return LaborRepo()


def _load_report(
    repo: LaborRepo,
    date_from: Optional[str],
    date_to: Optional[str],
    company: Optional[str],
) -> VerificationResponse:
    start, end = resolve_window(date_from, date_to, VERIFICATION_DEFAULT_DAYS)
    try:
        return build_verification_report(repo, start, end, company)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


router = APIRouter(prefix="/api/v1/verification", tags=["time-verification"])


@router.get("", response_model=VerificationResponse)
def verification_report(
    response: Response,
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    company: Optional[str] = Query(default=None),
    repo: LaborRepo = Depends(get_repo),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> VerificationResponse:
    _ensure_feature_enabled()
    report = _load_report(repo, date_from, date_to, company)
    response.headers["Cache-Control"] = "private, max-age=30"
    logger.info(
        "verification_report date_from=%s date_to=%s company=%s records=%s request_id=%s",
        report.date_from,
        report.date_to,
        report.company,
        report.summary.total,
        x_request_id,
    )
    return report


@router.get("/export", response_model=ExportTable)
def verification_export(
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    company: Optional[str] = Query(default=None),
    repo: LaborRepo = Depends(get_repo),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> ExportTable:
    _ensure_feature_enabled()
    report = _load_report(repo, date_from, date_to, company)
    table = verification_table(report.records)
    logger.info("verification_export rows=%s request_id=%s", len(table.rows), x_request_id)
    return table

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status

from ..config import settings
from ..models import (
    BurndownResponse,
    CostReportResponse,
    HoursTrendResponse,
    LaborSubmission,
    VerificationResponse,
)
from ..repos.labor_repo import LaborRepo
from .burndown import (
    MAX_BURNDOWN_DAYS,
    burndown_status,
    choose_sample_interval,
    compute_burndown,
    total_days_in_range,
)
from .costs import OrderBy, aggregate_costs, by_cost, rollup_label
from .hours_trend import TREND_PERIODS, hours_over_time
from .reconciliation import reconcile, summarise_reconciliation
from .snapshot_cache import SnapshotCache, SnapshotKey

logger = logging.getLogger(__name__)

VERIFICATION_DEFAULT_DAYS = 7
COST_DEFAULT_DAYS = 30
BURNDOWN_DEFAULT_DAYS = 90

# orderBy -> (key, descending)
COST_ORDERINGS: Dict[str, Tuple[OrderBy, bool]] = {
    "cost": (by_cost, True),
    "hours": (lambda rollup: rollup.hours, True),
    "name": (lambda rollup: rollup_label(rollup).casefold(), False),
}

_report_cache = SnapshotCache(settings.report_cache_ttl_seconds)


def clear_report_cache() -> None:
    _report_cache.clear()


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid date value {value}") from exc


def resolve_window(date_from_str: Optional[str], date_to_str: Optional[str], default_days: int) -> Tuple[date, date]:
    """Parse ``dateFrom``/``dateTo`` query values, defaulting to the trailing ``default_days`` ending today."""
    date_from = _parse_date(date_from_str)
    date_to = _parse_date(date_to_str)
    if date_to is None:
        date_to = date.today()
    if date_from is None:
        date_from = date_to - timedelta(days=default_days - 1)
    if date_from > date_to:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="dateFrom must be on or before dateTo")
    return date_from, date_to


def _check_range(date_from: date, date_to: date) -> None:
    if date_from > date_to:
        raise ValueError("dateFrom must be on or before dateTo")


def _normalise_company(company: Optional[str]) -> Optional[str]:
    if company is None:
        return None
    return company.strip() or None


def _approved(submissions: List[LaborSubmission]) -> List[LaborSubmission]:
    return [submission for submission in submissions if submission.approval_status == "approved"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_verification_report(
    repo: LaborRepo,
    date_from: date,
    date_to: date,
    company: Optional[str] = None,
) -> VerificationResponse:
    _check_range(date_from, date_to)
    company = _normalise_company(company)
    key = SnapshotKey("verification", date_from, date_to, company, source_version=repo.data_version())

    def compute() -> VerificationResponse:
        submissions = repo.fetch_labor_submissions(date_from, date_to, company)
        clock_events = repo.fetch_clock_events(date_from, date_to, company)
        records = reconcile(submissions, clock_events, repo.fetch_worker_profiles())
        summary = summarise_reconciliation(records)
        logger.debug(
            "verification report records=%s pass=%s mismatch=%s incomplete=%s",
            summary.total,
            summary.passed,
            summary.mismatch,
            summary.incomplete,
        )
        return VerificationResponse(
            date_from=date_from,
            date_to=date_to,
            company=company,
            records=records,
            summary=summary,
            generated_at=_now(),
        )

    return _report_cache.get_or_compute(key, compute)


def build_cost_report(
    repo: LaborRepo,
    date_from: date,
    date_to: date,
    company: Optional[str] = None,
    order_by: str = "cost",
) -> CostReportResponse:
    _check_range(date_from, date_to)
    if order_by not in COST_ORDERINGS:
        raise ValueError(f"orderBy must be one of {', '.join(COST_ORDERINGS)}")
    company = _normalise_company(company)
    key = SnapshotKey(
        "costs",
        date_from,
        date_to,
        company,
        filters=(("orderBy", order_by),),
        source_version=repo.data_version(),
    )

    def compute() -> CostReportResponse:
        submissions = _approved(repo.fetch_labor_submissions(date_from, date_to, company))
        key_fn, descending = COST_ORDERINGS[order_by]
        aggregates = aggregate_costs(submissions, repo.fetch_rates(), order_by=key_fn, descending=descending)
        return CostReportResponse(
            **dict(aggregates),
            date_from=date_from,
            date_to=date_to,
            company=company,
            order_by=order_by,
            generated_at=_now(),
        )

    return _report_cache.get_or_compute(key, compute)


def build_burndown_report(
    repo: LaborRepo,
    company: str,
    date_from: date,
    date_to: date,
) -> BurndownResponse:
    _check_range(date_from, date_to)
    company = _normalise_company(company)
    if not company:
        raise ValueError("company is required")
    key = SnapshotKey("burndown", date_from, date_to, company, source_version=repo.data_version())

    def compute() -> BurndownResponse:
        total_days = total_days_in_range(date_from, date_to)
        range_too_large = total_days > MAX_BURNDOWN_DAYS
        budget = repo.fetch_contract_budget(company)
        amount = budget.total_amount if budget else 0.0
        points = []
        if not range_too_large and amount > 0:
            submissions = _approved(repo.fetch_labor_submissions(date_from, date_to, company))
            points = compute_burndown(
                submissions,
                amount,
                date_from,
                date_to,
                rates=repo.fetch_rates(),
                company=company,
            )
        if budget is None:
            logger.debug("burndown report without budget company=%s", company)
        return BurndownResponse(
            company=company,
            date_from=date_from,
            date_to=date_to,
            contract_amount=amount,
            total_days=total_days,
            sample_interval=choose_sample_interval(total_days),
            range_too_large=range_too_large,
            status=burndown_status(points, as_of=min(date_to, date.today())),
            points=points,
            generated_at=_now(),
        )

    return _report_cache.get_or_compute(key, compute)


def build_hours_trend_report(
    repo: LaborRepo,
    date_from: date,
    date_to: date,
    company: Optional[str] = None,
    period: str = "daily",
) -> HoursTrendResponse:
    _check_range(date_from, date_to)
    if period not in TREND_PERIODS:
        raise ValueError(f"period must be one of {', '.join(TREND_PERIODS)}")
    company = _normalise_company(company)
    key = SnapshotKey(
        "hours_trend",
        date_from,
        date_to,
        company,
        filters=(("period", period),),
        source_version=repo.data_version(),
    )

    def compute() -> HoursTrendResponse:
        submissions = _approved(repo.fetch_labor_submissions(date_from, date_to, company))
        trend = hours_over_time(submissions, period)
        return HoursTrendResponse(
            **dict(trend),
            date_from=date_from,
            date_to=date_to,
            company=company,
            generated_at=_now(),
        )

    return _report_cache.get_or_compute(key, compute)



"""Contract budget burndown.

Built in two passes: per-day spend over every day in the window, then a
point-selection pass that thins long windows for charting. Each point carries
the spend since the previous point, and its accumulated cost is the previous
point's accumulated cost plus that spend, so the series adds up exactly.
"""
from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from ..models import BurndownPoint, BurndownStatus, LaborSubmission
from .rates import RateSource, as_resolver

logger = logging.getLogger(__name__)

MAX_BURNDOWN_DAYS = 730
DAILY_SAMPLE_MAX_DAYS = 90
THREE_DAY_SAMPLE_MAX_DAYS = 180
WEEKLY_SAMPLE_INTERVAL = 7


def total_days_in_range(date_from: date, date_to: date) -> int:
    return (date_to - date_from).days + 1


def choose_sample_interval(total_days: int) -> int:
    if total_days <= DAILY_SAMPLE_MAX_DAYS:
        return 1
    if total_days <= THREE_DAY_SAMPLE_MAX_DAYS:
        return 3
    return WEEKLY_SAMPLE_INTERVAL


def _normalise_company(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().casefold()
    return value or None


def _daily_costs(
    submissions: Iterable[LaborSubmission],
    rates: RateSource,
    date_from: date,
    date_to: date,
    company: Optional[str],
) -> Dict[date, float]:
    resolver = as_resolver(rates)
    company_key = _normalise_company(company)
    costs: Dict[date, float] = {}
    for submission in submissions:
        if submission.approval_status != "approved":
            continue
        if not date_from <= submission.date <= date_to:
            continue
        if company_key and _normalise_company(submission.company_name) != company_key:
            continue
        cost = submission.hours_claimed * resolver.resolve(submission.worker_id)
        costs[submission.date] = costs.get(submission.date, 0.0) + cost
    return costs


def _day_costs(daily_costs: Dict[date, float], date_from: date, total_days: int) -> List[float]:
    return [daily_costs.get(date_from + timedelta(days=offset), 0.0) for offset in range(total_days)]


def _sample_indices(total_days: int, interval: int) -> List[int]:
    indices = list(range(0, total_days, interval))
    last_index = total_days - 1
    if indices[-1] != last_index:
        indices.append(last_index)
    return indices


def compute_burndown(
    approved_submissions: Iterable[LaborSubmission],
    contract_amount: float,
    date_from: date,
    date_to: date,
    rates: RateSource = None,
    company: Optional[str] = None,
) -> List[BurndownPoint]:
    """Ideal vs. actual remaining budget across ``[date_from, date_to]``.

    Returns an empty list when the window is longer than ``MAX_BURNDOWN_DAYS``,
    when the contract amount is not positive, or when no approved submission
    falls inside the window. An empty list is not an error.
    """
    total_days = total_days_in_range(date_from, date_to)
    if total_days > MAX_BURNDOWN_DAYS:
        logger.debug("compute_burndown range too large total_days=%s", total_days)
        return []
    if total_days <= 0:
        return []

    amount = float(contract_amount or 0.0)
    if not math.isfinite(amount) or amount <= 0:
        return []

    daily_costs = _daily_costs(approved_submissions, rates, date_from, date_to, company)
    if not daily_costs:
        return []

    day_costs = _day_costs(daily_costs, date_from, total_days)

    interval = choose_sample_interval(total_days)
    last_index = total_days - 1
    points: List[BurndownPoint] = []
    previous_index = -1
    accumulated_cost = 0.0
    for index in _sample_indices(total_days, interval):
        if index == last_index:
            ideal_remaining = 0.0
        else:
            ideal_remaining = max(0.0, amount * (1 - index / last_index))
        daily_cost = sum(day_costs[previous_index + 1:index + 1])
        accumulated_cost += daily_cost
        points.append(
            BurndownPoint(
                date=date_from + timedelta(days=index),
                day_index=index,
                ideal_remaining=ideal_remaining,
                actual_remaining=max(0.0, amount - accumulated_cost),
                daily_cost=daily_cost,
                accumulated_cost=accumulated_cost,
                contract_amount=amount,
            )
        )
        previous_index = index

    logger.debug(
        "compute_burndown total_days=%s interval=%s points=%s spend=%.2f",
        total_days,
        interval,
        len(points),
        accumulated_cost,
    )
    return points


def burndown_status(points: List[BurndownPoint], as_of: Optional[date] = None) -> Optional[BurndownStatus]:
    """Compare actual vs. ideal remaining at the latest point on or before ``as_of``."""
    candidates = [point for point in points if as_of is None or point.date <= as_of]
    if not candidates:
        return None
    point = candidates[-1]
    if math.isclose(point.actual_remaining, point.ideal_remaining, abs_tol=0.005):
        return "on_track"
    if point.actual_remaining < point.ideal_remaining:
        return "behind"
    return "ahead"

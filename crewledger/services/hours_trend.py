from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Set

from ..models import (
    HoursTrend,
    HoursTrendPeak,
    HoursTrendPoint,
    HoursTrendSummary,
    LaborSubmission,
    TrendPeriod,
)

TREND_PERIODS = ("daily", "weekly", "monthly")


def period_start(value: date, period: str) -> date:
    if period == "daily":
        return value
    if period == "weekly":
        return value - timedelta(days=value.weekday())
    if period == "monthly":
        return value.replace(day=1)
    raise ValueError(f"period must be one of {', '.join(TREND_PERIODS)}")


def _safe_div(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def hours_over_time(approved_submissions: Iterable[LaborSubmission], period: TrendPeriod = "daily") -> HoursTrend:
    if period not in TREND_PERIODS:
        raise ValueError(f"period must be one of {', '.join(TREND_PERIODS)}")

    hours: Dict[date, float] = defaultdict(float)
    entries: Dict[date, int] = defaultdict(int)
    workers: Dict[date, Set[str]] = defaultdict(set)
    for submission in approved_submissions:
        if submission.approval_status != "approved":
            continue
        bucket = period_start(submission.date, period)
        hours[bucket] += submission.hours_claimed
        entries[bucket] += 1
        workers[bucket].add(submission.worker_id)

    points: List[HoursTrendPoint] = []
    for bucket in sorted(hours):
        unique_workers = len(workers[bucket])
        points.append(
            HoursTrendPoint(
                period_start=bucket,
                total_hours=hours[bucket],
                unique_workers=unique_workers,
                entries_count=entries[bucket],
                avg_hours_per_worker=round(_safe_div(hours[bucket], unique_workers), 2),
            )
        )

    if not points:
        return HoursTrend(period=period)

    total_hours = sum(point.total_hours for point in points)
    peak = max(points, key=lambda point: point.total_hours)
    summary = HoursTrendSummary(
        total_hours=round(total_hours, 2),
        avg_hours_per_period=round(_safe_div(total_hours, len(points)), 2),
        peak=HoursTrendPeak(period_start=peak.period_start, hours=peak.total_hours, workers=peak.unique_workers),
        periods=len(points),
        max_unique_workers=max(point.unique_workers for point in points),
    )
    return HoursTrend(period=period, points=points, summary=summary)

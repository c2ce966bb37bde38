from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from ..models import (
    CompanyCostRollup,
    CostAggregates,
    CostEntry,
    LaborSubmission,
    ProjectCostRollup,
    WorkerCostRollup,
)
from .rates import RateSource, as_resolver

logger = logging.getLogger(__name__)

Rollup = Union[WorkerCostRollup, CompanyCostRollup, ProjectCostRollup]
RollupT = TypeVar("RollupT", WorkerCostRollup, CompanyCostRollup, ProjectCostRollup)
OrderBy = Callable[[Rollup], Any]


def rollup_label(rollup: Rollup) -> str:
    if isinstance(rollup, WorkerCostRollup):
        return rollup.worker_name
    if isinstance(rollup, CompanyCostRollup):
        return rollup.company_name
    return rollup.project_name


def by_cost(rollup: Rollup) -> float:
    return rollup.cost


def cost_entries(approved_submissions: Iterable[LaborSubmission], rates: RateSource = None) -> List[CostEntry]:
    resolver = as_resolver(rates)
    entries: List[CostEntry] = []
    skipped = 0
    for submission in approved_submissions:
        if submission.approval_status != "approved":
            skipped += 1
            continue
        rate = resolver.resolve(submission.worker_id)
        entries.append(
            CostEntry(
                worker_id=submission.worker_id,
                worker_name=submission.worker_display_name or submission.worker_id,
                company_name=submission.company_name,
                project_name=submission.project_name,
                date=submission.date,
                hours=submission.hours_claimed,
                hourly_rate=rate,
                cost=submission.hours_claimed * rate,
                rate_missing=not resolver.has_rate(submission.worker_id),
            )
        )
    if skipped:
        logger.debug("cost_entries skipped non-approved submissions=%s", skipped)
    return entries


def _worker_rollups(entries: Sequence[CostEntry]) -> List[WorkerCostRollup]:
    buckets: Dict[Tuple[str, str], Dict[str, Any]] = {}
    for entry in entries:
        bucket = buckets.setdefault(
            (entry.worker_name, entry.company_name),
            {"hours": 0.0, "cost": 0.0, "count": 0, "projects": set(), "latest": None},
        )
        bucket["hours"] += entry.hours
        bucket["cost"] += entry.cost
        bucket["count"] += 1
        if entry.project_name:
            bucket["projects"].add(entry.project_name)
        latest: Optional[date] = bucket["latest"]
        if latest is None or entry.date > latest:
            bucket["latest"] = entry.date

    return [
        WorkerCostRollup(
            worker_name=worker_name,
            company_name=company_name,
            hours=data["hours"],
            cost=data["cost"],
            entries_count=data["count"],
            project_names=sorted(data["projects"]),
            latest_date=data["latest"],
        )
        for (worker_name, company_name), data in buckets.items()
    ]


def _company_rollups(entries: Sequence[CostEntry]) -> List[CompanyCostRollup]:
    buckets: Dict[str, Dict[str, Any]] = {}
    for entry in entries:
        bucket = buckets.setdefault(entry.company_name, {"hours": 0.0, "cost": 0.0, "workers": set()})
        bucket["hours"] += entry.hours
        bucket["cost"] += entry.cost
        bucket["workers"].add(entry.worker_name)

    return [
        CompanyCostRollup(
            company_name=company_name,
            hours=data["hours"],
            cost=data["cost"],
            workers=sorted(data["workers"]),
            worker_count=len(data["workers"]),
        )
        for company_name, data in buckets.items()
    ]


def _project_rollups(entries: Sequence[CostEntry]) -> List[ProjectCostRollup]:
    buckets: Dict[str, Dict[str, Any]] = {}
    for entry in entries:
        bucket = buckets.setdefault(entry.project_name, {"hours": 0.0, "cost": 0.0, "count": 0})
        bucket["hours"] += entry.hours
        bucket["cost"] += entry.cost
        bucket["count"] += 1

    return [
        ProjectCostRollup(
            project_name=project_name,
            hours=data["hours"],
            cost=data["cost"],
            entries_count=data["count"],
        )
        for project_name, data in buckets.items()
    ]


def _ordered(rollups: List[RollupT], order_by: OrderBy, descending: bool) -> List[RollupT]:
    rollups.sort(key=rollup_label)
    rollups.sort(key=order_by, reverse=descending)
    return rollups


def aggregate_costs(
    approved_submissions: Iterable[LaborSubmission],
    rates: RateSource = None,
    order_by: Optional[OrderBy] = None,
    descending: bool = True,
) -> CostAggregates:
    """Join approved submissions with rates and roll cost up three ways.

    Worker, company and project rollups are each summed straight from the
    per-entry costs. They default to descending cost; pass ``order_by`` (a key
    callable) and ``descending`` to reorder them.
    """
    resolver = as_resolver(rates)
    entries = cost_entries(approved_submissions, resolver)
    key = order_by or by_cost

    missing = sorted({entry.worker_id for entry in entries if entry.rate_missing})
    if missing:
        logger.debug("aggregate_costs workers without rate=%s", len(missing))

    return CostAggregates(
        entries=entries,
        by_worker=_ordered(_worker_rollups(entries), key, descending),
        by_company=_ordered(_company_rollups(entries), key, descending),
        by_project=_ordered(_project_rollups(entries), key, descending),
        total_hours=sum(entry.hours for entry in entries),
        total_cost=sum(entry.cost for entry in entries),
        missing_rate_workers=missing,
    )

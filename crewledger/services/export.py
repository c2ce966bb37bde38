from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models import BurndownPoint, ExportTable, ExportValue, ReconciliationRecord

VERIFICATION_COLUMNS = (
    "status",
    "worker",
    "date",
    "clockIn",
    "clockOut",
    "calculatedHours",
    "submittedHours",
)

BURNDOWN_COLUMNS = (
    "date",
    "day",
    "idealRemaining",
    "actualRemaining",
    "dailyCost",
    "accumulatedCost",
    "contractAmount",
)


def _clock_time(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%H:%M")


def verification_export_rows(records: Iterable[ReconciliationRecord]) -> List[Dict[str, ExportValue]]:
    return [
        {
            "status": record.status,
            "worker": record.display_name,
            "date": record.date.isoformat(),
            "clockIn": _clock_time(record.start_time),
            "clockOut": _clock_time(record.end_time),
            "calculatedHours": round(record.calculated_hours, 2),
            "submittedHours": round(record.submitted_hours, 2),
        }
        for record in records
    ]


def burndown_export_rows(points: Iterable[BurndownPoint]) -> List[Dict[str, ExportValue]]:
    return [
        {
            "date": point.date.isoformat(),
            "day": point.day_index,
            "idealRemaining": round(point.ideal_remaining, 2),
            "actualRemaining": round(point.actual_remaining, 2),
            "dailyCost": round(point.daily_cost, 2),
            "accumulatedCost": round(point.accumulated_cost, 2),
            "contractAmount": round(point.contract_amount, 2),
        }
        for point in points
    ]


def verification_table(records: Iterable[ReconciliationRecord]) -> ExportTable:
    return ExportTable(columns=list(VERIFICATION_COLUMNS), rows=verification_export_rows(records))


def burndown_table(points: Iterable[BurndownPoint]) -> ExportTable:
    return ExportTable(columns=list(BURNDOWN_COLUMNS), rows=burndown_export_rows(points))

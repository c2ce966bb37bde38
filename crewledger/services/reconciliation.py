"""Clock-event vs. submitted-hours reconciliation.

Every ``(worker_id, date)`` seen in either stream yields exactly one record, so
a missing submission or a missing clock pair shows up as ``incomplete``
instead of disappearing from the report.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..models import (
    ClockEvent,
    LaborSubmission,
    ReconciliationRecord,
    ReconciliationStatus,
    ReconciliationSummary,
    WorkerProfile,
)

logger = logging.getLogger(__name__)

PASS_TOLERANCE_HOURS = 0.25
# absorbs float noise in the subtraction without widening the tolerance
TOLERANCE_EPSILON = 1e-9

# Several punches of the same kind for one worker-day: the one processed last
# replaces the earlier ones. This is a policy choice, counted per record in
# ``duplicate_events`` so it stays visible.
DUPLICATE_CLOCK_EVENT_POLICY = "last_write_wins"

_Key = Tuple[str, date]
ProfileLookup = Mapping[str, Union[WorkerProfile, str]]


@dataclass
class _ClockSlot:
    start: Optional[ClockEvent] = None
    end: Optional[ClockEvent] = None
    overwritten: int = 0


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _group_clock_events(events: Iterable[ClockEvent]) -> Dict[_Key, _ClockSlot]:
    slots: Dict[_Key, _ClockSlot] = {}
    for event in events:
        if event.kind not in ("start", "end"):
            logger.debug("ignoring clock event kind=%s worker_id=%s", event.kind, event.worker_id)
            continue
        slot = slots.setdefault((event.worker_id, event.date), _ClockSlot())
        if getattr(slot, event.kind) is not None:
            slot.overwritten += 1
        setattr(slot, event.kind, event)
    return slots


def _group_submissions(submissions: Iterable[LaborSubmission]) -> Dict[_Key, LaborSubmission]:
    grouped: Dict[_Key, LaborSubmission] = {}
    for submission in submissions:
        grouped.setdefault((submission.worker_id, submission.date), submission)
    return grouped


def calculate_session_hours(start: Optional[datetime], end: Optional[datetime]) -> float:
    """Clocked hours rounded to 2 decimals; ``0.0`` for any unusable pair."""
    start_utc = _as_utc(start)
    end_utc = _as_utc(end)
    if start_utc is None or end_utc is None:
        return 0.0
    seconds = (end_utc - start_utc).total_seconds()
    if not math.isfinite(seconds) or seconds <= 0:
        return 0.0
    return round(seconds / 3600.0, 2)


def classify(calculated_hours: float, submitted_hours: float) -> ReconciliationStatus:
    if calculated_hours > 0 and submitted_hours > 0:
        difference = abs(calculated_hours - submitted_hours)
        return "pass" if difference <= PASS_TOLERANCE_HOURS + TOLERANCE_EPSILON else "mismatch"
    return "incomplete"


def _profile_name(profile: Union[WorkerProfile, str, None]) -> Optional[str]:
    if isinstance(profile, WorkerProfile):
        return profile.display_name
    return profile


def resolve_display_name(
    worker_id: str,
    profile: Union[WorkerProfile, str, None],
    submission: Optional[LaborSubmission],
    slot: Optional[_ClockSlot],
) -> str:
    candidates = [
        _profile_name(profile),
        submission.worker_display_name if submission else None,
        slot.start.reporter_display_name if slot and slot.start else None,
        slot.end.reporter_display_name if slot and slot.end else None,
    ]
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return f"Unknown worker ({worker_id})"


def reconcile(
    submissions: Iterable[LaborSubmission],
    clock_events: Iterable[ClockEvent],
    profiles: Optional[ProfileLookup] = None,
) -> List[ReconciliationRecord]:
    """Outer-join submissions and clock sessions per worker-day.

    Records come back newest date first; ties are ordered by display name and
    then worker id.
    """
    profiles = profiles or {}
    slots = _group_clock_events(clock_events)
    grouped_submissions = _group_submissions(submissions)

    records: List[ReconciliationRecord] = []
    for key in set(slots) | set(grouped_submissions):
        worker_id, work_date = key
        slot = slots.get(key)
        submission = grouped_submissions.get(key)

        start_time = slot.start.timestamp if slot and slot.start else None
        end_time = slot.end.timestamp if slot and slot.end else None
        calculated_hours = calculate_session_hours(start_time, end_time)
        submitted_hours = submission.hours_claimed if submission else 0.0
        status = classify(calculated_hours, submitted_hours)

        records.append(
            ReconciliationRecord(
                worker_id=worker_id,
                date=work_date,
                display_name=resolve_display_name(worker_id, profiles.get(worker_id), submission, slot),
                start_time=start_time,
                end_time=end_time,
                calculated_hours=calculated_hours,
                submitted_hours=submitted_hours,
                difference=round(abs(calculated_hours - submitted_hours), 2) if status != "incomplete" else None,
                status=status,
                duplicate_events=slot.overwritten if slot else 0,
                has_submission=submission is not None,
                approval_status=submission.approval_status if submission else None,
            )
        )

    records.sort(key=lambda record: (record.display_name.lower(), record.worker_id))
    records.sort(key=lambda record: record.date, reverse=True)
    logger.debug(
        "reconcile submissions=%s clock_keys=%s records=%s",
        len(grouped_submissions),
        len(slots),
        len(records),
    )
    return records


def summarise_reconciliation(records: Iterable[ReconciliationRecord]) -> ReconciliationSummary:
    counts: Dict[str, int] = {"pass": 0, "mismatch": 0, "incomplete": 0}
    for record in records:
        counts[record.status] += 1
    return ReconciliationSummary(
        total=sum(counts.values()),
        passed=counts["pass"],
        mismatch=counts["mismatch"],
        incomplete=counts["incomplete"],
    )

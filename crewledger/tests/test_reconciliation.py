from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from crewledger.models import ClockEvent, WorkerProfile
from crewledger.services.reconciliation import (
    calculate_session_hours,
    classify,
    reconcile,
    summarise_reconciliation,
)

from conftest import punch, submission

DAY = date(2024, 3, 4)


def _single(records):
    assert len(records) == 1
    return records[0]


def test_matching_session_passes():
    record = _single(
        reconcile(
            [submission("w1", DAY, 8.5, name="Ana")],
            [punch("w1", DAY, "start", 8), punch("w1", DAY, "end", 16, 30)],
        )
    )
    assert record.status == "pass"
    assert record.calculated_hours == pytest.approx(8.5)
    assert record.submitted_hours == pytest.approx(8.5)
    assert record.difference == pytest.approx(0.0)
    assert record.has_submission is True
    assert record.approval_status == "approved"


def test_overclaimed_day_is_mismatch():
    record = _single(
        reconcile(
            [submission("w1", DAY, 10)],
            [punch("w1", DAY, "start", 8), punch("w1", DAY, "end", 16)],
        )
    )
    assert record.calculated_hours == pytest.approx(8.0)
    assert record.status == "mismatch"
    assert record.difference == pytest.approx(2.0)


def test_missing_start_is_incomplete():
    record = _single(reconcile([submission("w1", DAY, 8)], [punch("w1", DAY, "end", 17)]))
    assert record.calculated_hours == 0
    assert record.status == "incomplete"
    assert record.difference is None
    assert record.start_time is None


@pytest.mark.parametrize(
    ("calculated", "submitted", "expected"),
    [
        (8.0, 8.25, "pass"),
        (8.0, 7.75, "pass"),
        (8.0, 8.2501, "mismatch"),
        (8.0, 8.25004, "mismatch"),
        (8.33, 8.08, "pass"),
        (8.08, 8.33, "pass"),
        (8.0, 0.0, "incomplete"),
        (0.0, 8.0, "incomplete"),
    ],
)
def test_classify_tolerance_boundary(calculated, submitted, expected):
    assert classify(calculated, submitted) == expected


def test_session_hours_are_rounded_to_two_decimals():
    start = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)
    assert calculate_session_hours(start, start + timedelta(minutes=500)) == 8.33


def test_end_before_start_yields_zero_hours():
    record = _single(
        reconcile(
            [submission("w1", DAY, 8)],
            [punch("w1", DAY, "start", 17), punch("w1", DAY, "end", 9)],
        )
    )
    assert record.calculated_hours == 0
    assert record.status == "incomplete"


def test_unparseable_timestamp_is_incomplete_not_an_error():
    events = [
        ClockEvent(worker_id="w1", date=DAY, kind="start", timestamp="not-a-time"),
        ClockEvent(worker_id="w1", date=DAY, kind="end", timestamp="16:00"),
    ]
    record = _single(reconcile([submission("w1", DAY, 8)], events))
    assert record.start_time is None
    assert record.calculated_hours == 0
    assert record.status == "incomplete"


def test_form_type_spellings_and_clock_strings():
    events = [
        ClockEvent(worker_id="w1", date=DAY, kind="start-of-day", timestamp="07:00"),
        ClockEvent(worker_id="w1", date=DAY, kind="End-Of-Day", timestamp="15:00"),
    ]
    record = _single(reconcile([submission("w1", DAY, 8)], events))
    assert record.calculated_hours == pytest.approx(8.0)
    assert record.status == "pass"


def test_naive_and_aware_timestamps_mix_as_utc():
    events = [
        ClockEvent(worker_id="w1", date=DAY, kind="start", timestamp=datetime(2024, 3, 4, 8, 0)),
        ClockEvent(worker_id="w1", date=DAY, kind="end", timestamp="2024-03-04T16:00:00+00:00"),
    ]
    record = _single(reconcile([submission("w1", DAY, 8)], events))
    assert record.calculated_hours == pytest.approx(8.0)


def test_duplicate_punches_last_write_wins():
    events = [
        punch("w1", DAY, "start", 6),
        punch("w1", DAY, "start", 8),
        punch("w1", DAY, "end", 12),
        punch("w1", DAY, "end", 16),
    ]
    record = _single(reconcile([submission("w1", DAY, 8)], events))
    assert record.start_time.hour == 8
    assert record.end_time.hour == 16
    assert record.duplicate_events == 2
    assert record.status == "pass"


def test_first_submission_wins_for_duplicate_key():
    record = _single(
        reconcile(
            [submission("w1", DAY, 8), submission("w1", DAY, 3)],
            [punch("w1", DAY, "start", 8), punch("w1", DAY, "end", 16)],
        )
    )
    assert record.submitted_hours == pytest.approx(8.0)


def test_outer_join_keeps_both_orphan_sides():
    records = reconcile(
        [submission("w1", DAY, 8, name="Ana")],
        [punch("w2", DAY, "start", 8, reporter="Ben"), punch("w2", DAY, "end", 16, reporter="Ben")],
    )
    by_worker = {record.worker_id: record for record in records}
    assert set(by_worker) == {"w1", "w2"}
    assert by_worker["w1"].status == "incomplete"
    assert by_worker["w2"].status == "incomplete"
    assert by_worker["w2"].calculated_hours == pytest.approx(8.0)
    assert by_worker["w2"].has_submission is False
    assert by_worker["w2"].approval_status is None


def test_display_name_precedence():
    profiles = {"w1": WorkerProfile(worker_id="w1", display_name="Ana Registered")}
    events = [punch("w1", DAY, "start", 8, reporter="Ana Punch"), punch("w2", DAY, "start", 8, reporter="Ben Punch")]
    records = reconcile(
        [submission("w1", DAY, 8, name="Ana Typed"), submission("w3", DAY, 8)],
        events,
        profiles,
    )
    names = {record.worker_id: record.display_name for record in records}
    assert names["w1"] == "Ana Registered"
    assert names["w2"] == "Ben Punch"
    assert names["w3"] == "Unknown worker (w3)"


def test_submission_name_beats_reporter_name():
    record = _single(
        reconcile(
            [submission("w1", DAY, 8, name="Ana Typed")],
            [punch("w1", DAY, "start", 8, reporter="Ana Punch")],
        )
    )
    assert record.display_name == "Ana Typed"


def test_sorted_newest_first_then_by_name():
    later = DAY + timedelta(days=1)
    records = reconcile(
        [
            submission("w2", DAY, 8, name="Zed"),
            submission("w1", DAY, 8, name="amy"),
            submission("w3", later, 8, name="Bob"),
        ],
        [],
    )
    assert [(record.date, record.display_name) for record in records] == [
        (later, "Bob"),
        (DAY, "amy"),
        (DAY, "Zed"),
    ]


def test_empty_inputs_produce_no_records():
    assert reconcile([], []) == []


def test_summary_counts_statuses():
    records = reconcile(
        [submission("w1", DAY, 8), submission("w2", DAY, 10), submission("w3", DAY, 8)],
        [
            punch("w1", DAY, "start", 8),
            punch("w1", DAY, "end", 16),
            punch("w2", DAY, "start", 8),
            punch("w2", DAY, "end", 16),
        ],
    )
    summary = summarise_reconciliation(records)
    assert summary.total == 3
    assert (summary.passed, summary.mismatch, summary.incomplete) == (1, 1, 1)
    assert summary.model_dump(by_alias=True)["pass"] == 1

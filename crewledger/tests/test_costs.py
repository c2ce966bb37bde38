from __future__ import annotations

from datetime import date

import pytest

from crewledger.models import RateEntry
from crewledger.services.costs import aggregate_costs, cost_entries, rollup_label

from conftest import submission

DAY = date(2024, 5, 6)


def test_unresolved_rate_costs_nothing():
    aggregates = aggregate_costs(
        [submission("w1", DAY, 5, name="Ana"), submission("w2", DAY, 5, name="Ben")],
        {"w1": 20},
    )
    costs = {entry.worker_id: entry.cost for entry in aggregates.entries}
    assert costs == {"w1": pytest.approx(100.0), "w2": 0.0}
    assert aggregates.total_cost == pytest.approx(100.0)
    assert aggregates.missing_rate_workers == ["w2"]
    missing = {entry.worker_id: entry.rate_missing for entry in aggregates.entries}
    assert missing == {"w1": False, "w2": True}


def test_non_approved_submissions_are_skipped():
    entries = cost_entries(
        [
            submission("w1", DAY, 8),
            submission("w1", DAY, 8, status="pending"),
            submission("w1", DAY, 8, status="rejected"),
        ],
        {"w1": 10},
    )
    assert len(entries) == 1


def test_rollup_totals_agree():
    submissions = [
        submission("w1", DAY, 7.5, name="Ana", company="Acme", project="Tower"),
        submission("w2", DAY, 3.25, name="Ben", company="Acme", project="Depot"),
        submission("w3", DAY, 9.1, name="Cy", company="Granite", project="Tower"),
        submission("w1", date(2024, 5, 7), 6.3, name="Ana", company="Acme", project="Depot"),
    ]
    rates = {"w1": RateEntry(worker_id="w1", hourly_rate=33.33), "w2": 41.7, "w3": "27.15"}
    aggregates = aggregate_costs(submissions, rates)

    per_entry = sum(entry.cost for entry in aggregates.entries)
    assert sum(item.cost for item in aggregates.by_worker) == pytest.approx(per_entry)
    assert sum(item.cost for item in aggregates.by_company) == pytest.approx(per_entry)
    assert sum(item.cost for item in aggregates.by_project) == pytest.approx(per_entry)
    assert aggregates.total_cost == pytest.approx(per_entry)
    assert aggregates.total_hours == pytest.approx(7.5 + 3.25 + 9.1 + 6.3)


def test_worker_rollup_tracks_entries_projects_and_latest_date():
    aggregates = aggregate_costs(
        [
            submission("w1", DAY, 4, name="Ana", project="Tower"),
            submission("w1", date(2024, 5, 9), 4, name="Ana", project="Depot"),
        ],
        {"w1": 10},
    )
    (worker,) = aggregates.by_worker
    assert worker.entries_count == 2
    assert worker.project_names == ["Depot", "Tower"]
    assert worker.latest_date == date(2024, 5, 9)
    assert worker.cost == pytest.approx(80.0)


def test_company_rollup_counts_distinct_workers():
    aggregates = aggregate_costs(
        [
            submission("w1", DAY, 4, name="Ana"),
            submission("w1", date(2024, 5, 7), 4, name="Ana"),
            submission("w2", DAY, 4, name="Ben"),
        ],
        {"w1": 10, "w2": 10},
    )
    (company,) = aggregates.by_company
    assert company.workers == ["Ana", "Ben"]
    assert company.worker_count == 2


def test_default_order_is_descending_cost():
    aggregates = aggregate_costs(
        [
            submission("w1", DAY, 1, name="Cheap", company="A"),
            submission("w2", DAY, 10, name="Pricey", company="B"),
        ],
        {"w1": 10, "w2": 10},
    )
    assert [item.worker_name for item in aggregates.by_worker] == ["Pricey", "Cheap"]
    assert [item.company_name for item in aggregates.by_company] == ["B", "A"]


def test_order_override_by_name_ascending():
    aggregates = aggregate_costs(
        [
            submission("w1", DAY, 1, name="Zed"),
            submission("w2", DAY, 10, name="Amy"),
        ],
        {"w1": 10, "w2": 10},
        order_by=rollup_label,
        descending=False,
    )
    assert [item.worker_name for item in aggregates.by_worker] == ["Amy", "Zed"]


def test_worker_name_falls_back_to_id():
    (entry,) = cost_entries([submission("w9", DAY, 2)], None)
    assert entry.worker_name == "w9"
    assert entry.cost == 0.0


def test_empty_input():
    aggregates = aggregate_costs([], {})
    assert aggregates.entries == []
    assert aggregates.total_cost == 0
    assert aggregates.by_worker == []

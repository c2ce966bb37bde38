from __future__ import annotations

import hashlib
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional

import pytest

from crewledger.config import settings
from crewledger.models import ClockEvent, ContractBudget, LaborSubmission, RateEntry, WorkerProfile
from crewledger.services.reporting import clear_report_cache


class FakeLaborRepo:
    """In-memory stand-in for ``LaborRepo``; filters the way the SQL does."""

    def __init__(
        self,
        submissions: Iterable[LaborSubmission] = (),
        clock_events: Iterable[ClockEvent] = (),
        rates: Optional[Dict[str, RateEntry]] = None,
        budgets: Optional[Dict[str, ContractBudget]] = None,
        profiles: Optional[Dict[str, WorkerProfile]] = None,
    ) -> None:
        self.submissions = list(submissions)
        self.clock_events = list(clock_events)
        self.rates = dict(rates or {})
        self.budgets = dict(budgets or {})
        self.profiles = dict(profiles or {})
        self.calls: List[str] = []

    @staticmethod
    def _company_matches(value: Optional[str], company: Optional[str]) -> bool:
        return company is None or (value or "").lower() == company.lower()

    def fetch_labor_submissions(self, date_from: date, date_to: date, company: Optional[str] = None):
        self.calls.append("submissions")
        return [
            item
            for item in self.submissions
            if date_from <= item.date <= date_to and self._company_matches(item.company_name, company)
        ]

    def fetch_clock_events(self, date_from: date, date_to: date, company: Optional[str] = None):
        self.calls.append("clock_events")
        return [
            item
            for item in self.clock_events
            if date_from <= item.date <= date_to and self._company_matches(item.company_name, company)
        ]

    def fetch_rates(self):
        self.calls.append("rates")
        return dict(self.rates)

    def fetch_contract_budget(self, company: str):
        self.calls.append("budget")
        for name, budget in self.budgets.items():
            if name.lower() == company.lower():
                return budget
        return None

    def fetch_worker_profile(self, worker_id: str):
        return self.profiles.get(worker_id)

    def fetch_worker_profiles(self):
        self.calls.append("profiles")
        return dict(self.profiles)

    def data_version(self) -> str:
        # content fingerprint, so any edit to the stored rows changes it like a real write would
        state = (
            self.submissions,
            self.clock_events,
            sorted(self.rates.items()),
            sorted(self.budgets.items()),
            sorted(self.profiles.items()),
        )
        return hashlib.sha256(repr(state).encode("utf-8")).hexdigest()


def submission(
    worker_id: str,
    day: date,
    hours: float,
    *,
    name: str = "",
    company: str = "Acme",
    project: str = "Tower",
    status: str = "approved",
) -> LaborSubmission:
    return LaborSubmission(
        worker_id=worker_id,
        worker_display_name=name,
        company_name=company,
        project_name=project,
        date=day,
        hours_claimed=hours,
        approval_status=status,
    )


def punch(worker_id: str, day: date, kind: str, hour: int, minute: int = 0, *, reporter: Optional[str] = None) -> ClockEvent:
    return ClockEvent(
        worker_id=worker_id,
        date=day,
        kind=kind,
        timestamp=datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc),
        reporter_display_name=reporter,
        company_name="Acme",
    )


@contextmanager
def _feature_flags(**flags: bool):
    original = {name: getattr(settings, name) for name in flags}
    for name, value in flags.items():
        setattr(settings, name, value)
    try:
        yield
    finally:
        for name, value in original.items():
            setattr(settings, name, value)


@pytest.fixture
def reporting_enabled():
    with _feature_flags(feature_time_verification=True, feature_cost_burndown=True):
        yield


@pytest.fixture
def reporting_disabled():
    with _feature_flags(feature_time_verification=False, feature_cost_burndown=False):
        yield


@pytest.fixture(autouse=True)
def _fresh_report_cache():
    clear_report_cache()
    yield
    clear_report_cache()

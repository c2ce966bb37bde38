from __future__ import annotations

import logging
from datetime import date
from time import perf_counter
from typing import Dict, List, Optional

from psycopg.rows import dict_row

from ..db import VERSIONED_TABLES, pool
from ..models import ClockEvent, ContractBudget, LaborSubmission, RateEntry, WorkerProfile
from .worker_identity import WorkerIdentityResolver

logger = logging.getLogger(__name__)


class LaborRepo:
    """Read-only access to time records, rates and contract budgets."""

    def fetch_labor_submissions(
        self,
        date_from: date,
        date_to: date,
        company: Optional[str] = None,
    ) -> List[LaborSubmission]:
        start = perf_counter()
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SET search_path TO crewledger, public")
                cur.execute(
                    """
                    SELECT worker_id, worker_display_name, company_name, project_name,
                           work_date, hours_claimed, approval_status
                    FROM crewledger.labor_submissions
                    WHERE work_date BETWEEN %s AND %s
                      AND (%s::text IS NULL OR LOWER(company_name) = LOWER(%s::text))
                    ORDER BY work_date, id
                    """,
                    (date_from, date_to, company, company),
                )
                rows = cur.fetchall()
        elapsed = (perf_counter() - start) * 1000
        logger.debug(
            "fetch_labor_submissions date_from=%s date_to=%s company=%s rows=%s elapsed_ms=%.2f",
            date_from,
            date_to,
            company,
            len(rows),
            elapsed,
        )

        identities: Optional[WorkerIdentityResolver] = None
        submissions: List[LaborSubmission] = []
        for row in rows:
            worker_id = row["worker_id"]
            if not worker_id:
                if identities is None:
                    identities = WorkerIdentityResolver(self.fetch_worker_profiles().values())
                worker_id = identities.resolve(worker_id, row["worker_display_name"])
            submissions.append(
                LaborSubmission(
                    worker_id=worker_id,
                    worker_display_name=row["worker_display_name"],
                    company_name=row["company_name"],
                    project_name=row["project_name"],
                    date=row["work_date"],
                    hours_claimed=row["hours_claimed"],
                    approval_status=row["approval_status"],
                )
            )
        return submissions

    def fetch_clock_events(
        self,
        date_from: date,
        date_to: date,
        company: Optional[str] = None,
    ) -> List[ClockEvent]:
        start = perf_counter()
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SET search_path TO crewledger, public")
                cur.execute(
                    """
                    SELECT worker_id, company_name, work_date, kind, event_ts, reporter_display_name
                    FROM crewledger.clock_events
                    WHERE work_date BETWEEN %s AND %s
                      AND (%s::text IS NULL OR LOWER(company_name) = LOWER(%s::text))
                    ORDER BY work_date, created_at, id
                    """,
                    (date_from, date_to, company, company),
                )
                rows = cur.fetchall()
        elapsed = (perf_counter() - start) * 1000
        logger.debug(
            "fetch_clock_events date_from=%s date_to=%s company=%s rows=%s elapsed_ms=%.2f",
            date_from,
            date_to,
            company,
            len(rows),
            elapsed,
        )
        return [
            ClockEvent(
                worker_id=row["worker_id"],
                date=row["work_date"],
                kind=row["kind"],
                timestamp=row["event_ts"],
                reporter_display_name=row["reporter_display_name"],
                company_name=row["company_name"],
            )
            for row in rows
        ]

    def fetch_rates(self) -> Dict[str, RateEntry]:
        start = perf_counter()
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SET search_path TO crewledger, public")
                cur.execute("SELECT worker_id, hourly_rate FROM crewledger.worker_rates")
                rows = cur.fetchall()
        elapsed = (perf_counter() - start) * 1000
        logger.debug("fetch_rates rows=%s elapsed_ms=%.2f", len(rows), elapsed)
        return {
            row["worker_id"]: RateEntry(worker_id=row["worker_id"], hourly_rate=row["hourly_rate"])
            for row in rows
        }

    def fetch_contract_budget(self, company: str) -> Optional[ContractBudget]:
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SET search_path TO crewledger, public")
                cur.execute(
                    """
                    SELECT company_name, total_amount
                    FROM crewledger.contract_budgets
                    WHERE LOWER(company_name) = LOWER(%s)
                    LIMIT 1
                    """,
                    (company,),
                )
                row = cur.fetchone()
        if not row:
            return None
        return ContractBudget(company_name=row["company_name"], total_amount=row["total_amount"])

    def fetch_worker_profile(self, worker_id: str) -> Optional[WorkerProfile]:
        """Single-worker lookup. Report builders use the bulk ``fetch_worker_profiles`` instead."""
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SET search_path TO crewledger, public")
                cur.execute(
                    """
                    SELECT worker_id, display_name, company_name
                    FROM crewledger.worker_profiles
                    WHERE worker_id = %s
                    """,
                    (worker_id,),
                )
                row = cur.fetchone()
        if not row:
            return None
        return WorkerProfile(**row)

    def fetch_worker_profiles(self) -> Dict[str, WorkerProfile]:
        start = perf_counter()
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SET search_path TO crewledger, public")
                cur.execute("SELECT worker_id, display_name, company_name FROM crewledger.worker_profiles")
                rows = cur.fetchall()
        elapsed = (perf_counter() - start) * 1000
        logger.debug("fetch_worker_profiles rows=%s elapsed_ms=%.2f", len(rows), elapsed)
        return {row["worker_id"]: WorkerProfile(**row) for row in rows}

    def data_version(self) -> str:
        """Cheap fingerprint of the source tables, used as a cache key component."""
        columns = ",\n".join(
            f"(SELECT COUNT(*) || '@' || COALESCE(MAX(updated_at)::text, '') FROM crewledger.{table})"
            for table in VERSIONED_TABLES
        )
        with pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {columns}")
                row = cur.fetchone()
        return "|".join(row or ())

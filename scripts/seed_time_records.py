#!/usr/bin/env python3
"""
Seed demo workers, time submissions, clock punches, rates and contract budgets.

The script is idempotent: profiles, rates and budgets are upserted, and the
submissions and clock events of the demo workers are replaced on each run.
A handful of deliberate anomalies (missing punches, over-claimed days, an
unregistered name-only submission, a worker without a rate) keep every
verification status represented.
"""
from __future__ import annotations

import argparse
import random
import sys
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
from typing import List, Tuple

ROOT = Path(__file__).resolve().parent.parent

sys.path.append(str(ROOT))

from crewledger.db import close_pool, initialize_database, open_pool, pool  # type: ignore  # noqa: E402

RANDOM = random.Random(42)
DEMO_PREFIX = "demo-"

COMPANIES = {
    "Northwind Builders": 250000.0,
    "Granite Civil": 180000.0,
    "Harbor Electric": 90000.0,
}

PROJECTS = ["Riverside Clinic", "Depot Expansion", "Bridge Retrofit", "Library Annex"]

WORKERS: List[Tuple[str, str, str]] = [
    ("demo-001", "Ana Ruiz", "Northwind Builders"),
    ("demo-002", "Ben Okafor", "Northwind Builders"),
    ("demo-003", "Chen Wei", "Northwind Builders"),
    ("demo-004", "Dana Kowalski", "Granite Civil"),
    ("demo-005", "Eli Haddad", "Granite Civil"),
    ("demo-006", "Farah Nasser", "Harbor Electric"),
    ("demo-007", "Gus Lindqvist", "Harbor Electric"),
]

# demo-007 deliberately has no rate
RATED_WORKERS = {worker_id for worker_id, _, _ in WORKERS if worker_id != "demo-007"}


def _punch(work_date: date, hour: float) -> datetime:
    minutes = int(round(hour * 60))
    return datetime.combine(work_date, time(hour=minutes // 60, minute=minutes % 60), tzinfo=timezone.utc)


def seed_reference_data() -> None:
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute("SET search_path TO crewledger, public")
            for worker_id, name, company in WORKERS:
                cur.execute(
                    """
                    INSERT INTO crewledger.worker_profiles (worker_id, display_name, company_name)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (worker_id) DO UPDATE
                    SET display_name = EXCLUDED.display_name,
                        company_name = EXCLUDED.company_name,
                        updated_at = NOW()
                    """,
                    (worker_id, name, company),
                )
                if worker_id in RATED_WORKERS:
                    cur.execute(
                        """
                        INSERT INTO crewledger.worker_rates (worker_id, hourly_rate)
                        VALUES (%s, %s)
                        ON CONFLICT (worker_id) DO UPDATE
                        SET hourly_rate = EXCLUDED.hourly_rate, updated_at = NOW()
                        """,
                        (worker_id, round(RANDOM.uniform(28, 65), 2)),
                    )
            for company, amount in COMPANIES.items():
                cur.execute(
                    """
                    INSERT INTO crewledger.contract_budgets (company_name, total_amount)
                    VALUES (%s, %s)
                    ON CONFLICT (company_name) DO UPDATE
                    SET total_amount = EXCLUDED.total_amount, updated_at = NOW()
                    """,
                    (company, amount),
                )
        conn.commit()


def seed_time_records(days: int) -> int:
    today = date.today()
    inserted = 0
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute("SET search_path TO crewledger, public")
            cur.execute("DELETE FROM crewledger.clock_events WHERE worker_id LIKE %s", (f"{DEMO_PREFIX}%",))
            cur.execute(
                "DELETE FROM crewledger.labor_submissions WHERE worker_id LIKE %s OR worker_id IS NULL",
                (f"{DEMO_PREFIX}%",),
            )
            for offset in range(days):
                work_date = today - timedelta(days=offset)
                if work_date.weekday() >= 5:
                    continue
                for worker_id, name, company in WORKERS:
                    if RANDOM.random() < 0.1:
                        continue
                    start_hour = RANDOM.choice([6.5, 7.0, 7.5, 8.0])
                    worked = RANDOM.choice([7.5, 8.0, 8.0, 8.5, 9.0, 10.0])
                    claimed = worked
                    roll = RANDOM.random()
                    if roll < 0.08:
                        claimed = worked + RANDOM.choice([1.0, 1.5, 2.0])
                    status = RANDOM.choices(["approved", "pending", "rejected"], weights=[80, 15, 5])[0]

                    cur.execute(
                        """
                        INSERT INTO crewledger.labor_submissions
                            (worker_id, worker_display_name, company_name, project_name, work_date, hours_claimed, approval_status)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        """,
                        (worker_id, name, company, RANDOM.choice(PROJECTS), work_date, claimed, status),
                    )
                    inserted += 1

                    cur.execute(
                        """
                        INSERT INTO crewledger.clock_events
                            (worker_id, company_name, work_date, kind, event_ts, reporter_display_name)
                        VALUES (%s, %s, %s, 'start', %s, %s)
                        """,
                        (worker_id, company, work_date, _punch(work_date, start_hour), name),
                    )
                    if 0.08 <= roll < 0.13:
                        # forgot to clock out
                        continue
                    cur.execute(
                        """
                        INSERT INTO crewledger.clock_events
                            (worker_id, company_name, work_date, kind, event_ts, reporter_display_name)
                        VALUES (%s, %s, %s, 'end', %s, %s)
                        """,
                        (worker_id, company, work_date, _punch(work_date, start_hour + worked), name),
                    )

            cur.execute(
                """
                INSERT INTO crewledger.labor_submissions
                    (worker_id, worker_display_name, company_name, project_name, work_date, hours_claimed, approval_status)
                VALUES (NULL, %s, %s, %s, %s, %s, 'approved')
                """,
                ("Walk-in Contractor", "Granite Civil", PROJECTS[1], today - timedelta(days=1), 6.0),
            )
            inserted += 1
        conn.commit()
    return inserted


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--days", type=int, default=60, help="Number of trailing days to generate")
    args = parser.parse_args()
    open_pool()
    try:
        initialize_database()
        seed_reference_data()
        inserted = seed_time_records(args.days)
        print(f"Seeded {len(WORKERS)} workers and {inserted} labor submissions over {args.days} days.")
    finally:
        close_pool()


if __name__ == "__main__":
    main()

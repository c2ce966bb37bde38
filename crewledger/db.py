import logging
from typing import Iterable, Tuple

from psycopg_pool import ConnectionPool

from .config import settings

logger = logging.getLogger(__name__)

# start closed, we'll open in app lifespan
pool = ConnectionPool(conninfo=settings.database_url, max_size=10, open=False)


SCHEMA_STATEMENTS: Iterable[str] = (
    """
    CREATE TABLE IF NOT EXISTS crewledger.worker_profiles (
        worker_id TEXT PRIMARY KEY,
        display_name TEXT NOT NULL,
        company_name TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS crewledger.labor_submissions (
        id BIGSERIAL PRIMARY KEY,
        worker_id TEXT,
        worker_display_name TEXT NOT NULL DEFAULT '',
        company_name TEXT NOT NULL DEFAULT '',
        project_name TEXT NOT NULL DEFAULT '',
        work_date DATE NOT NULL,
        hours_claimed NUMERIC(6, 2) NOT NULL DEFAULT 0,
        approval_status TEXT NOT NULL DEFAULT 'pending',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        CONSTRAINT labor_submissions_status_chk
            CHECK (approval_status IN ('pending', 'approved', 'rejected'))
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_labor_submissions_work_date ON crewledger.labor_submissions(work_date)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_labor_submissions_worker ON crewledger.labor_submissions(worker_id, work_date)
    """,
    """
    CREATE TABLE IF NOT EXISTS crewledger.clock_events (
        id BIGSERIAL PRIMARY KEY,
        worker_id TEXT NOT NULL,
        company_name TEXT,
        work_date DATE NOT NULL,
        kind TEXT NOT NULL,
        event_ts TIMESTAMPTZ,
        reporter_display_name TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_clock_events_work_date ON crewledger.clock_events(work_date)
    """,
    """
    CREATE TABLE IF NOT EXISTS crewledger.worker_rates (
        worker_id TEXT PRIMARY KEY,
        hourly_rate NUMERIC(10, 2) NOT NULL DEFAULT 0,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS crewledger.contract_budgets (
        company_name TEXT PRIMARY KEY,
        total_amount NUMERIC(14, 2) NOT NULL DEFAULT 0,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
)

# Every write to these tables must move COUNT(*) or MAX(updated_at), which is what
# LaborRepo.data_version fingerprints for the report cache.
VERSIONED_TABLES: Tuple[str, ...] = (
    "labor_submissions",
    "clock_events",
    "worker_rates",
    "contract_budgets",
    "worker_profiles",
)

TOUCH_UPDATED_AT_FUNCTION = """
CREATE OR REPLACE FUNCTION crewledger.touch_updated_at() RETURNS trigger
LANGUAGE plpgsql AS $$
BEGIN
    NEW.updated_at = clock_timestamp();
    RETURN NEW;
END;
$$
"""


def _touch_trigger_statements(table: str) -> Tuple[str, str]:
    trigger = f"trg_{table}_touch_updated_at"
    return (
        f"DROP TRIGGER IF EXISTS {trigger} ON crewledger.{table}",
        f"CREATE TRIGGER {trigger} BEFORE UPDATE ON crewledger.{table} "
        "FOR EACH ROW EXECUTE FUNCTION crewledger.touch_updated_at()",
    )


TRIGGER_STATEMENTS: Tuple[str, ...] = (TOUCH_UPDATED_AT_FUNCTION,) + tuple(
    statement for table in VERSIONED_TABLES for statement in _touch_trigger_statements(table)
)


def open_pool() -> None:
    if pool.closed:
        pool.open()


def close_pool() -> None:
    if not pool.closed:
        pool.close()


def initialize_database() -> None:
    try:
        ensure_schema()
    except Exception:  # pragma: no cover - defensive guard
        logger.exception("Database initialization failed")
        raise


def ensure_schema() -> None:
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute("CREATE SCHEMA IF NOT EXISTS crewledger")
            cur.execute("SET search_path TO crewledger, public")
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
            for statement in TRIGGER_STATEMENTS:
                cur.execute(statement)
        conn.commit()

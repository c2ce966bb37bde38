import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from .config import settings
from .db import close_pool, initialize_database, open_pool, pool
from .routers import burndown, costs, verification

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    open_pool()  # open DB pool at startup
    database_available = True
    try:
        initialize_database()
    except Exception as exc:  # pragma: no cover - local dev without postgres
        database_available = False
        logger.warning("Database initialization failed; report endpoints will error until it is reachable: %s", exc)
    app.state.database_available = database_available
    try:
        yield
    finally:
        close_pool()  # close pool at shutdown


app = FastAPI(
    title="CrewLedger Backend",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(verification.router)
app.include_router(costs.router)
app.include_router(burndown.router)


@app.get("/api/health")
def health():
    return {"ok": True}


# DB connectivity quick-check
@app.get("/api/db/ping")
def db_ping():
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute("select 'ok'::text")
            (status,) = cur.fetchone()
            return {"db": status}

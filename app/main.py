import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import async_session_maker
from app.core.seed import seed_status_hierarchy
from app.services.scheduler import StatusSweepScheduler
from app.services.status_engine import AssignmentRule, StatusEngine
from app.services.stores import sql_stores

logger = logging.getLogger(__name__)


def build_status_engine(session_factory=async_session_maker) -> StatusEngine:
    rules = [AssignmentRule(rule.trigger_status, rule.role) for rule in settings.AUTO_ASSIGN_RULES]
    return StatusEngine(sql_stores(session_factory), assignment_rules=rules)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if settings.SEED_STATUS_HIERARCHY:
        await seed_status_hierarchy()

    scheduler = None
    if settings.STATUS_SWEEP_ENABLED:
        scheduler = StatusSweepScheduler(app.state.status_engine, settings.STATUS_SWEEP_INTERVAL_HOURS)
        scheduler.start()
    yield
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(
    title="Partner Leads CRM API",
    description="Lead pipeline with validated status transitions and idle-timeout sweeps",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")
app.state.status_engine = build_status_engine()


@app.get("/health")
async def health():
    return {"status": "ok", "service": "partner-leads-crm", "version": "0.1.0"}

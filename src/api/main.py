import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_ledger_repo, get_route_repo, get_rules, get_settings
from src.app_shell.config import ConfigurationError, validate_ops_rules
from src.app_shell.seed import apply_seed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = get_rules()
        validate_ops_rules(rules, settings.storage)
        logger.info("Rules loaded from %s", settings.rules_path)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        logger.critical("Startup configuration failed: %s", e)
        sys.exit(1)

    if settings.storage == "sqlite":
        Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
        SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()

    if rules.seed.enabled:
        apply_seed(rules.seed, get_route_repo(settings), get_ledger_repo(settings))

    yield


app = FastAPI(
    title="FuelEU Compliance Ledger API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import banking, compliance, pools, routes  # noqa: E402

app.include_router(routes.router, prefix="/routes", tags=["Routes"])
app.include_router(compliance.router, prefix="/compliance", tags=["Compliance"])
app.include_router(banking.router, prefix="/banking", tags=["Banking"])
app.include_router(pools.router, prefix="/pools", tags=["Pools"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "fueleu-ledger"}

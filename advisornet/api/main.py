import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from advisornet.adapters.sqlite.migrator import SQLiteMigrator
from advisornet.api.deps import get_settings
from advisornet.app_shell.bootstrap import bootstrap_system
from advisornet.app_shell.config import ConfigError, validate_ops_rules
from advisornet.app_shell.context import ServiceContext
from advisornet.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Validate configuration, migrate and bootstrap before serving."""
    settings = get_settings()

    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings.data_dir)
        logger.info("Rules loaded from %s", settings.rules_path)
    except (FileNotFoundError, ValueError, ConfigError) as e:
        logger.critical("Startup validation failed: %s", e)
        sys.exit(1)

    SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()

    ctx = ServiceContext.create(
        settings.db_path, str(settings.storage_dir), rules, public_url=settings.public_url
    )
    bootstrap_system(ctx)

    yield


app = FastAPI(
    title="AdvisorNet API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from advisornet.api.routes import (  # noqa: E402
    admin,
    auth,
    connections,
    directory,
    files,
    profiles,
    publications,
    register,
)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(register.router, prefix="/api/register", tags=["Registration"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(directory.router, prefix="/api/directory", tags=["Directory"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["Profiles"])
app.include_router(connections.router, prefix="/api/connections", tags=["Connections"])
app.include_router(publications.router, prefix="/api/publications", tags=["Publications"])
app.include_router(files.router, prefix="/files", tags=["Files"])


# CORS (Allow Frontend)
origins = [
    origin.strip()
    for origin in os.environ.get(
        "ADVISORNET_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
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
    return {"status": "ok", "service": "api"}

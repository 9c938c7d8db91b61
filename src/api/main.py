import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_rules, get_settings
from src.app_shell.config import validate_ops_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = get_rules(settings)
        validate_ops_rules(rules, settings.data_dir)
        applied = SQLiteMigrator(settings.db_path).run_migrations()
    except Exception:
        logger.critical("Startup checks failed", exc_info=True)
        raise
    logger.info(
        "Rules loaded from %s; %d migration(s) applied", settings.rules_path, len(applied)
    )

    yield


app = FastAPI(
    title="Local SEO Directory API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import (  # noqa: E402
    admin_blog,
    admin_listings,
    auth,
    blog,
    listings,
    storage,
    wizard,
)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(listings.router, prefix="/api/listings", tags=["Listings"])
app.include_router(blog.router, prefix="/api/blog", tags=["Blog"])
app.include_router(wizard.router, prefix="/api/wizard", tags=["Wizard"])
app.include_router(admin_listings.router, prefix="/api/admin/listings", tags=["Admin Listings"])
app.include_router(admin_blog.router, prefix="/api/admin/blog", tags=["Admin Blog"])
app.include_router(storage.router, prefix="/storage", tags=["Storage"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
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
    return {"status": "ok", "service": "api"}

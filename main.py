import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Base, engine, settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.core.session import session_registry
from app.api.routers import commits, insights, profile, reports, session, sleep
from app.services.github_client import github_clients
from app.services.github_sync import sync_trigger

configure_logging()
logger = logging.getLogger(__name__)


# =====================================================================
# LIFESPAN - session listener and GitHub clients
# =====================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    unsubscribe = session_registry.subscribe(sync_trigger)
    logger.info("Commit sync subscribed to session changes")
    try:
        yield
    finally:
        unsubscribe()
        await github_clients.aclose()
        logger.info("GitHub clients closed")


# =====================================================================
# CREATE APP
# =====================================================================

app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    description="Developer wellness API: sleep, commit activity and daily insights",
    version="1.0.0",
    lifespan=lifespan,
)

# =====================================================================
# CORS MIDDLEWARE - MUST BE FIRST!
# =====================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

logger.info(f"CORS configured for origins: {settings.CORS_ORIGINS}")

register_exception_handlers(app)

# =====================================================================
# DATABASE INITIALIZATION
# =====================================================================

Base.metadata.create_all(bind=engine)

# =====================================================================
# HEALTH CHECK (before routers)
# =====================================================================


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "cors": "enabled"}


# =====================================================================
# ROUTES
# =====================================================================

app.include_router(session.router)
app.include_router(reports.router)
app.include_router(commits.router)
app.include_router(sleep.router)
app.include_router(insights.router)
app.include_router(profile.router)

# =====================================================================
# ROOT ENDPOINT
# =====================================================================


@app.get("/")
def root():
    """API root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "session": "/auth/session",
            "dashboard": "/dashboard",
            "commits": "/commits",
            "sleep": "/sleep",
            "insights": "/insights",
            "reports": "/reports/monthly",
            "profile": "/profile",
        },
    }

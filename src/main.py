import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.catalog import router as catalog_api_router
from src.api.errors import register_exception_handlers
from src.api.export import router as export_api_router
from src.core.config import config
from src.core.utils.logging import configure_logging
from src.dashboard.context import DashboardContext

# --- Application Setup ---

configure_logging(config.logging)

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="API Catalog Dashboard",
    description="Teams, APIs and business groups, edited through change requests.",
    version="0.1.0",
)

# --- CORS Configuration ---

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=config.cors.headers,
)

# --- Include Routers ---

app.include_router(catalog_api_router, prefix="/api/v1")
app.include_router(export_api_router, prefix="/api/v1")
register_exception_handlers(app)

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "API catalog dashboard is running."}


# --- Application Lifecycle ---


@app.on_event("startup")
async def startup_event():
    """
    Application startup logic.

    Resolves the backing repository and loads every catalog document. Any
    failure here is fatal: the service does not start with a partial catalog.
    """
    config.validate()

    dashboard = DashboardContext.from_config(config)
    app.state.dashboard = dashboard

    try:
        await dashboard.verify_repository()
        await dashboard.load()
    except Exception:
        logger.exception("dashboard_initialization_failed", source=dashboard.loader.source)
        await dashboard.close()
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown logic."""
    dashboard: DashboardContext | None = getattr(app.state, "dashboard", None)
    if dashboard is not None:
        await dashboard.close()
    logger.info("dashboard_stopped")


# --- Health Check Endpoints ---


@app.get("/health/catalog", tags=["Health Check"])
async def health_catalog():
    """Report the resolved repository, the document source and readiness."""
    dashboard: DashboardContext | None = getattr(app.state, "dashboard", None)
    if dashboard is None:
        return {"ready": False}

    return {
        "ready": dashboard.ready,
        "repository": dashboard.repository.full_name,
        "source": dashboard.loader.source,
        "submission_sink": dashboard.submitter.sink.value if dashboard.submitter.enabled else None,
        "teams": len(dashboard.catalog.team_names) if dashboard.ready else 0,
        "apis": len(dashboard.catalog.apis) if dashboard.ready else 0,
    }

from fastapi import Depends, HTTPException, Request, status

from src.catalog.catalog import Catalog
from src.dashboard.context import DashboardContext

# --- Context Dependencies ---  # DI: tests override these with a prepared context.


def get_dashboard(request: Request) -> DashboardContext:
    """
    Injects the DashboardContext built at startup.
    """
    dashboard: DashboardContext | None = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Dashboard is not initialized.")
    return dashboard


def get_catalog(dashboard: DashboardContext = Depends(get_dashboard)) -> Catalog:
    """
    Catalog dependency for endpoints that read or edit records; refuses until every document has loaded.
    """
    if not dashboard.ready:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Catalog is still loading.")
    return dashboard.catalog

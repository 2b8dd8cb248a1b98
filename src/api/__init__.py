# API endpoints package

from src.api.catalog import router as catalog_router
from src.api.errors import register_exception_handlers
from src.api.export import router as export_router

__all__ = [
    "catalog_router",
    "export_router",
    "register_exception_handlers",
]

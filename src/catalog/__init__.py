"""
Catalog package.

The in-memory model of teams, valid values and per-team API lists, plus its
exports.
"""

from src.catalog.catalog import Catalog
from src.catalog.export import export_csv, export_document, export_json, import_json
from src.catalog.models import ApiListDocument, ApiRecord, CatalogStats, Team, TeamSummary, ValidValues

__all__ = [
    "ApiListDocument",
    "ApiRecord",
    "Catalog",
    "CatalogStats",
    "Team",
    "TeamSummary",
    "ValidValues",
    "export_csv",
    "export_document",
    "export_json",
    "import_json",
]

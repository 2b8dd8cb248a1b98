"""
Content store package.

Loads the catalog's JSON documents from a GitHub repository or a local
directory.
"""

from src.store.documents import (
    load_all_team_api_documents,
    load_catalog,
    load_valid_values,
    select_loader,
    team_document_filename,
)
from src.store.interface import DocumentLoader

__all__ = [
    "DocumentLoader",
    "load_all_team_api_documents",
    "load_catalog",
    "load_valid_values",
    "select_loader",
    "team_document_filename",
]

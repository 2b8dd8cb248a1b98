"""
Catalog document loading.

The valid-values document names every team; each team's APIs live in a
document whose filename is derived from the team name. Team documents are
loaded one after another, and a team without a document simply has no APIs
yet.
"""

import re
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from src.catalog.catalog import Catalog
from src.catalog.models import ApiListDocument, ValidValues
from src.context.resolver import RepoContext
from src.core.config.catalog_config import CatalogConfig
from src.core.errors import DecodeError, NotFoundError
from src.core.utils.logging import log_operation
from src.integrations.github import GitHubClient
from src.store.interface import DocumentLoader
from src.store.loaders import GitHubDocumentLoader, LocalDocumentLoader

logger = structlog.get_logger(__name__)

TEAM_DOCUMENT_SUFFIX = "-mule-apis.json"
_WHITESPACE = re.compile(r"\s+")


def team_document_filename(team_name: str) -> str:
    """``"Platform Team"`` -> ``"platform-team-mule-apis.json"``."""
    return f"{_WHITESPACE.sub('-', team_name.lower())}{TEAM_DOCUMENT_SUFFIX}"


def select_loader(
    repository: RepoContext,
    catalog_config: CatalogConfig,
    client: GitHubClient | None = None,
) -> DocumentLoader:
    """Pick the remote loader when a repository was resolved, the local one otherwise."""
    if repository.is_remote:
        if client is None:
            raise ValueError("A GitHubClient is required to load documents from a repository")
        return GitHubDocumentLoader(client, repository, base_path=catalog_config.remote_base_path)
    return LocalDocumentLoader(Path(catalog_config.local_data_dir))


def _parse(model: type, data: Any, path: str) -> Any:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise DecodeError(f"{path} does not match the expected document shape: {e}", details={"path": path}) from e


async def load_valid_values(loader: DocumentLoader, path: str) -> ValidValues:
    data = await loader.load_document(path)
    return _parse(ValidValues, data, path)


async def load_all_team_api_documents(loader: DocumentLoader, team_names: list[str]) -> dict[str, ApiListDocument]:
    """
    Load every team's API document, serially.

    A missing document becomes an empty ``{teamName, apis: []}`` document.
    Decode failures propagate.
    """
    documents: dict[str, ApiListDocument] = {}
    for team_name in team_names:
        filename = team_document_filename(team_name)
        try:
            data = await loader.load_document(filename)
        except NotFoundError:
            logger.warning("team_document_missing", team=team_name, path=filename)
            documents[team_name] = ApiListDocument.empty(team_name)
            continue

        if isinstance(data, dict) and not data.get("teamName"):
            data = {**data, "teamName": team_name}
        documents[team_name] = _parse(ApiListDocument, data, filename)
        logger.info("team_document_loaded", team=team_name, apis=len(documents[team_name].apis))
    return documents


async def load_catalog(loader: DocumentLoader, valid_values_path: str) -> Catalog:
    """Load the valid-values document and every team document, then build the catalog."""
    async with log_operation("catalog_load", source=loader.source):
        valid_values = await load_valid_values(loader, valid_values_path)
        documents = await load_all_team_api_documents(loader, valid_values.team_names)
        return Catalog(valid_values, documents)

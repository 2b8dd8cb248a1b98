"""
GitHub-based document loader.

Loads catalog documents through the GitHub contents API, implementing the
DocumentLoader interface.
"""

import asyncio
import base64
import binascii
import json
from typing import Any

import aiohttp
import structlog

from src.context.resolver import RepoContext
from src.core.errors import DecodeError, NotFoundError
from src.integrations.github import GitHubClient
from src.store.interface import DocumentLoader

logger = structlog.get_logger(__name__)


class GitHubDocumentLoader(DocumentLoader):
    """Reads ``<base_path>/<path>`` from the resolved repository and decodes the base64 payload."""

    def __init__(self, client: GitHubClient, repository: RepoContext, base_path: str = "docs"):
        if not repository.is_remote:
            raise ValueError("GitHubDocumentLoader needs a resolved owner and repository")
        self.github_client = client
        self.repository = repository
        self.base_path = base_path.strip("/")

    @property
    def source(self) -> str:
        return f"github:{self.repository.full_name}/{self.base_path}"

    def _full_path(self, path: str) -> str:
        path = path.lstrip("/")
        return f"{self.base_path}/{path}" if self.base_path else path

    async def load_document(self, path: str) -> Any:
        full_path = self._full_path(path)
        try:
            payload = await self.github_client.get_contents(self.repository.full_name, full_path)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("document_fetch_failed", path=full_path, error=str(e))
            raise NotFoundError(
                f"Failed to load {full_path} from {self.repository.full_name}: {e}", details={"path": path}
            ) from e
        if not payload:
            raise NotFoundError(f"Failed to load {full_path} from {self.repository.full_name}", details={"path": path})

        encoded = payload.get("content") if isinstance(payload, dict) else None
        if encoded is None:
            raise DecodeError(f"{full_path} has no content field; is it a directory?", details={"path": path})

        try:
            raw = base64.b64decode(encoded)
            document = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("document_decode_failed", path=full_path, error=str(e))
            raise DecodeError(f"Failed to decode {full_path}: {e}", details={"path": path}) from e

        logger.debug("document_loaded", source=self.source, path=path)
        return document

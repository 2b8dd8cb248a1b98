"""
Local document loader.

Reads catalog documents from a directory on disk, used when no backing
repository could be resolved (local development).
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog

from src.core.errors import DecodeError, NotFoundError
from src.store.interface import DocumentLoader

logger = structlog.get_logger(__name__)


class LocalDocumentLoader(DocumentLoader):
    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    @property
    def source(self) -> str:
        return f"local:{self.base_dir}"

    async def load_document(self, path: str) -> Any:
        file_path = self.base_dir / path.lstrip("/")
        try:
            text = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(f"Failed to load {path}", details={"path": path}) from e
        except UnicodeDecodeError as e:
            raise DecodeError(f"Failed to decode {path}: {e}", details={"path": path}) from e

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("document_decode_failed", path=str(file_path), error=str(e))
            raise DecodeError(f"Failed to decode {path}: {e}", details={"path": path}) from e

        logger.debug("document_loaded", source=self.source, path=path)
        return document

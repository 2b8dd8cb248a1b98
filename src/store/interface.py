from abc import ABC, abstractmethod
from typing import Any


class DocumentLoader(ABC):
    """
    Abstract interface for reading catalog JSON documents.

    One implementation reads from a GitHub repository, the other from a local
    directory; the choice is made once at startup from the resolved
    repository context.
    """

    @abstractmethod
    async def load_document(self, path: str) -> Any:
        """
        Fetch and decode one JSON document.

        Args:
            path: Document path relative to the loader's base location

        Returns:
            The parsed JSON value

        Raises:
            NotFoundError: The document does not exist or could not be read
            DecodeError: The payload is not valid base64, UTF-8 or JSON
        """
        pass

    @property
    @abstractmethod
    def source(self) -> str:
        """Human-readable description of where documents come from."""
        pass

from src.store.loaders.github_loader import GitHubDocumentLoader
from src.store.loaders.local_loader import LocalDocumentLoader

__all__ = [
    "GitHubDocumentLoader",
    "LocalDocumentLoader",
]

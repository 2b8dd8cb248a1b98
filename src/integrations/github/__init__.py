"""
GitHub API adapter.

This package provides the REST client used to read catalog documents and to
post change requests.
"""

from src.integrations.github.api import GitHubClient

__all__ = [
    "GitHubClient",
]

"""
GitHub configuration.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """GitHub configuration."""

    token: str = ""
    app_id: str = ""
    private_key: str = ""
    installation_id: int | None = None
    api_base_url: str = "https://api.github.com"

    @property
    def uses_app_auth(self) -> bool:
        """True when GitHub App credentials are configured instead of a plain token."""
        return bool(self.app_id and self.private_key and self.installation_id)

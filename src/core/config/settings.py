"""
Main configuration class that composes all configs.
"""

import json
import os

from dotenv import load_dotenv

from src.core.config.catalog_config import CatalogConfig
from src.core.config.cors_config import DEFAULT_ORIGINS, CORSConfig
from src.core.config.github_config import GitHubConfig
from src.core.config.logging_config import LoggingConfig

# Load environment variables from a .env file
load_dotenv()

SUBMISSION_SINKS = {"issue", "dispatch"}


def _optional_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            token=os.getenv("GITHUB_TOKEN", ""),
            app_id=os.getenv("APP_CLIENT_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            installation_id=_optional_int(os.getenv("INSTALLATION_ID_GITHUB")),
            api_base_url=os.getenv("API_BASE_URL_GITHUB", "https://api.github.com"),
        )

        issue_labels = os.getenv("CATALOG_ISSUE_LABELS", '["catalog-change"]')
        try:
            labels = json.loads(issue_labels)
        except json.JSONDecodeError:
            # Accept a plain comma separated list as well
            labels = [label.strip() for label in issue_labels.split(",") if label.strip()]

        self.catalog = CatalogConfig(
            page_url=os.getenv("DASHBOARD_PAGE_URL", ""),
            pages_domain=os.getenv("CATALOG_PAGES_DOMAIN", "github.io"),
            default_owner=os.getenv("CATALOG_DEFAULT_OWNER") or None,
            default_repo=os.getenv("CATALOG_DEFAULT_REPO") or None,
            remote_base_path=os.getenv("CATALOG_REMOTE_BASE_PATH", "docs"),
            local_data_dir=os.getenv("CATALOG_LOCAL_DATA_DIR", "docs"),
            valid_values_file=os.getenv("CATALOG_VALID_VALUES_FILE", "valid-platform-values.json"),
            submission_sink=os.getenv("CATALOG_SUBMISSION_SINK", "issue").lower(),
            issue_labels=labels,
        )

        # CORS configuration
        cors_headers = os.getenv("CORS_HEADERS", json.dumps(["*"]))
        cors_origins = os.getenv("CORS_ORIGINS", json.dumps(DEFAULT_ORIGINS))

        try:
            self.cors = CORSConfig(
                headers=json.loads(cors_headers),
                origins=json.loads(cors_origins),
            )
        except json.JSONDecodeError:
            # Fallback to default values if JSON parsing fails
            self.cors = CORSConfig()

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file_path=os.getenv("LOG_FILE_PATH"),
            json=os.getenv("LOG_JSON", "false").lower() == "true",
        )

        # Development settings
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if self.catalog.submission_sink not in SUBMISSION_SINKS:
            errors.append(f"CATALOG_SUBMISSION_SINK must be one of {sorted(SUBMISSION_SINKS)}")

        if bool(self.catalog.default_owner) != bool(self.catalog.default_repo):
            errors.append("CATALOG_DEFAULT_OWNER and CATALOG_DEFAULT_REPO must be set together")

        if self.github.app_id and not self.github.private_key:
            errors.append("PRIVATE_KEY_BASE64_GITHUB is required when APP_CLIENT_ID_GITHUB is set")

        if self.github.app_id and self.github.installation_id is None:
            errors.append("INSTALLATION_ID_GITHUB is required when APP_CLIENT_ID_GITHUB is set")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()

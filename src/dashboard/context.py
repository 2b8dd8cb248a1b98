"""
Application context.

One explicitly constructed object holds everything a request needs: the
resolved repository, the selected document loader, the catalog and the
change submitter. It is created at startup and stored on ``app.state``.
"""

from dataclasses import dataclass
from typing import Any

import structlog

from src.catalog.catalog import Catalog
from src.changes.submitter import ChangeRequest, ChangeSubmitter
from src.context.resolver import RepoContext, resolve_repo_context
from src.core.config import Config
from src.core.models import ChangeAction, SubmissionSink
from src.integrations.github import GitHubClient
from src.store.documents import load_catalog, select_loader
from src.store.interface import DocumentLoader

logger = structlog.get_logger(__name__)


@dataclass
class DashboardContext:
    repository: RepoContext
    loader: DocumentLoader
    submitter: ChangeSubmitter
    client: GitHubClient
    valid_values_path: str
    catalog: Catalog | None = None

    @classmethod
    def from_config(cls, app_config: Config, client: GitHubClient | None = None) -> "DashboardContext":
        """Resolve the repository once and wire the matching loader and submitter."""
        catalog_config = app_config.catalog
        repository = resolve_repo_context(
            catalog_config.page_url,
            pages_domain=catalog_config.pages_domain,
            default_owner=catalog_config.default_owner,
            default_repo=catalog_config.default_repo,
        )
        client = client or GitHubClient(app_config.github)
        submitter = ChangeSubmitter(
            client,
            repository,
            sink=SubmissionSink(catalog_config.submission_sink),
            labels=catalog_config.issue_labels,
        )
        return cls(
            repository=repository,
            loader=select_loader(repository, catalog_config, client),
            submitter=submitter,
            client=client,
            valid_values_path=catalog_config.valid_values_file,
        )

    @property
    def ready(self) -> bool:
        return self.catalog is not None and self.catalog.loaded

    async def verify_repository(self) -> bool:
        """Check the resolved repository is reachable. Logged only; never fatal."""
        if not self.repository.is_remote:
            return False
        repo_data = await self.client.get_repository(self.repository.full_name)
        if repo_data:
            logger.info("repository_reachable", repo=repo_data.get("full_name"), url=repo_data.get("html_url"))
            return True
        logger.warning("repository_unreachable", repo=self.repository.full_name)
        return False

    async def load(self) -> Catalog:
        """Load every document. Failures propagate: a partially loaded catalog is never exposed."""
        self.catalog = await load_catalog(self.loader, self.valid_values_path)
        logger.info(
            "dashboard_ready",
            source=self.loader.source,
            teams=len(self.catalog.team_names),
            apis=len(self.catalog.apis),
        )
        return self.catalog

    async def reload(self) -> Catalog:
        """Discard local edits and reload from the content store. The old catalog survives a failed reload."""
        logger.info("dashboard_reload_requested", source=self.loader.source)
        return await self.load()

    async def submit_change(self, action: ChangeAction, payload: dict[str, Any]) -> ChangeRequest | None:
        return await self.submitter.submit(action, payload)

    async def close(self) -> None:
        await self.client.close()

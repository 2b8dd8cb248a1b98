"""
Change request submission.

Catalog edits are never written to the backing repository directly. Each
accepted edit is posted as a GitHub issue or a ``repository_dispatch`` event
for a human or workflow to apply later, so a successful submission only
means the request was accepted.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from src.context.resolver import RepoContext
from src.core.errors import ChangeSubmissionError
from src.core.models import ChangeAction, SubmissionSink
from src.core.utils.logging import log_operation
from src.integrations.github import GitHubClient

logger = structlog.get_logger(__name__)

ACTION_TITLES = {
    ChangeAction.ADD_TEAM: "Add team",
    ChangeAction.DELETE_TEAM: "Delete team",
    ChangeAction.UPDATE_API: "Add or update API",
    ChangeAction.DELETE_API: "Delete API",
    ChangeAction.ASSIGN_API_TO_TEAM: "Reassign API",
    ChangeAction.ADD_VALUE: "Add valid value",
    ChangeAction.DELETE_VALUE: "Delete valid value",
}


@dataclass(frozen=True)
class ChangeRequest:
    """What GitHub accepted for a submitted edit."""

    action: ChangeAction
    sink: SubmissionSink
    repository: str
    number: int | None = None
    url: str | None = None


def _subject(payload: dict[str, Any]) -> str:
    for key in ("assetId", "teamName", "name", "value"):
        if payload.get(key):
            return str(payload[key])
    return "catalog"


def describe_change(action: ChangeAction, payload: dict[str, Any]) -> tuple[str, str]:
    """Build the issue title and markdown body for a change."""
    title = f"[Catalog] {ACTION_TITLES.get(action, action.value)}: {_subject(payload)}"
    body = "\n".join(
        [
            f"**Action:** `{action.value}`",
            f"**Requested at:** {datetime.now(timezone.utc).isoformat()}",
            "",
            "```json",
            json.dumps(payload, indent=2, sort_keys=True, default=str),
            "```",
        ]
    )
    return title, body


class ChangeSubmitter:
    """Posts change requests to the repository the catalog was loaded from."""

    def __init__(
        self,
        client: GitHubClient,
        repository: RepoContext,
        sink: SubmissionSink = SubmissionSink.ISSUE,
        labels: list[str] | None = None,
    ):
        self.github_client = client
        self.repository = repository
        self.sink = sink
        self.labels = labels or []

    @property
    def enabled(self) -> bool:
        return self.repository.is_remote

    async def submit(self, action: ChangeAction, payload: dict[str, Any]) -> ChangeRequest | None:
        """
        Submit an edit for asynchronous approval.

        Returns None in local mode, where edits are not durable. Raises
        ChangeSubmissionError when GitHub rejects the request.
        """
        if not self.enabled:
            logger.info("change_submission_skipped", action=action.value, reason="no backing repository")
            return None

        repo = self.repository.full_name
        async with log_operation("change_submission", repo=repo, action=action.value, sink=self.sink.value):
            if self.sink is SubmissionSink.DISPATCH:
                return await self._dispatch(repo, action, payload)
            return await self._open_issue(repo, action, payload)

    async def _open_issue(self, repo: str, action: ChangeAction, payload: dict[str, Any]) -> ChangeRequest:
        title, body = describe_change(action, payload)
        labels = [*self.labels, action.value]
        issue = await self.github_client.create_issue(repo, title=title, body=body, labels=labels)
        if not issue:
            raise ChangeSubmissionError(
                f"GitHub did not accept the '{action.value}' issue; changes are only local",
                details={"repository": repo, "sink": SubmissionSink.ISSUE.value},
            )
        return ChangeRequest(
            action=action,
            sink=SubmissionSink.ISSUE,
            repository=repo,
            number=issue.get("number"),
            url=issue.get("html_url"),
        )

    async def _dispatch(self, repo: str, action: ChangeAction, payload: dict[str, Any]) -> ChangeRequest:
        client_payload = {"action": action.value, "data": payload}
        accepted = await self.github_client.create_repository_dispatch(
            repo, event_type=action.value, client_payload=client_payload
        )
        if not accepted:
            raise ChangeSubmissionError(
                f"GitHub did not accept the '{action.value}' dispatch; changes are only local",
                details={"repository": repo, "sink": SubmissionSink.DISPATCH.value},
            )
        return ChangeRequest(action=action, sink=SubmissionSink.DISPATCH, repository=repo)

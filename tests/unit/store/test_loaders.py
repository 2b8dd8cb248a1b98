import asyncio
import base64
import json
from unittest.mock import AsyncMock

import aiohttp
import pytest

from src.context.resolver import LOCAL_CONTEXT, RepoContext
from src.core.errors import DecodeError, NotFoundError
from src.store.documents import load_all_team_api_documents
from src.store.loaders import GitHubDocumentLoader, LocalDocumentLoader

REPO = RepoContext("acme", "api-catalog")


def _encoded(document) -> dict:
    raw = json.dumps(document).encode("utf-8")
    # GitHub wraps the base64 body every 60 characters
    text = base64.b64encode(raw).decode("ascii")
    return {"content": "\n".join(text[i : i + 60] for i in range(0, len(text), 60)), "encoding": "base64"}


@pytest.fixture
def mock_github_client() -> AsyncMock:
    return AsyncMock()


class TestGitHubDocumentLoader:
    @pytest.mark.asyncio
    async def test_decodes_base64_json(self, mock_github_client: AsyncMock) -> None:
        document = {"teamName": "Data", "apis": [{"assetId": "abc-123", "apiName": "Ledger é"}]}
        mock_github_client.get_contents.return_value = _encoded(document)
        loader = GitHubDocumentLoader(mock_github_client, REPO)

        assert await loader.load_document("data-mule-apis.json") == document
        mock_github_client.get_contents.assert_awaited_once_with("acme/api-catalog", "docs/data-mule-apis.json")

    @pytest.mark.asyncio
    async def test_missing_document(self, mock_github_client: AsyncMock) -> None:
        mock_github_client.get_contents.return_value = None
        loader = GitHubDocumentLoader(mock_github_client, REPO, base_path="")

        with pytest.raises(NotFoundError):
            await loader.load_document("missing.json")
        mock_github_client.get_contents.assert_awaited_once_with("acme/api-catalog", "missing.json")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"content": base64.b64encode(b"{not json").decode("ascii")},
            {"content": base64.b64encode(b"\xff\xfe\xfa").decode("ascii")},
            {"content": "abc"},
            [{"name": "a-directory-listing.json"}],
        ],
    )
    async def test_malformed_payloads(self, mock_github_client: AsyncMock, payload) -> None:
        mock_github_client.get_contents.return_value = payload
        loader = GitHubDocumentLoader(mock_github_client, REPO)

        with pytest.raises(DecodeError):
            await loader.load_document("valid-platform-values.json")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", [aiohttp.ClientConnectionError("connection reset"), asyncio.TimeoutError()])
    async def test_transport_failures_are_not_found(self, mock_github_client: AsyncMock, failure: Exception) -> None:
        mock_github_client.get_contents.side_effect = failure
        loader = GitHubDocumentLoader(mock_github_client, REPO)

        with pytest.raises(NotFoundError) as exc_info:
            await loader.load_document("platform-mule-apis.json")
        assert exc_info.value.__cause__ is failure

    @pytest.mark.asyncio
    async def test_unreachable_team_document_becomes_an_empty_list(self, mock_github_client: AsyncMock) -> None:
        mock_github_client.get_contents.side_effect = aiohttp.ClientConnectionError("connection reset")
        loader = GitHubDocumentLoader(mock_github_client, REPO)

        documents = await load_all_team_api_documents(loader, ["Platform"])

        assert documents["Platform"].apis == []

    def test_requires_a_remote_repository(self, mock_github_client: AsyncMock) -> None:
        with pytest.raises(ValueError):
            GitHubDocumentLoader(mock_github_client, LOCAL_CONTEXT)

    def test_source(self, mock_github_client: AsyncMock) -> None:
        assert GitHubDocumentLoader(mock_github_client, REPO).source == "github:acme/api-catalog/docs"


class TestLocalDocumentLoader:
    @pytest.mark.asyncio
    async def test_reads_json_file(self, tmp_path) -> None:
        (tmp_path / "valid-platform-values.json").write_text('{"validTeamNames": ["Platform"]}', encoding="utf-8")
        loader = LocalDocumentLoader(tmp_path)

        assert await loader.load_document("/valid-platform-values.json") == {"validTeamNames": ["Platform"]}

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(NotFoundError):
            await LocalDocumentLoader(tmp_path).load_document("nope.json")

    @pytest.mark.asyncio
    async def test_directory_is_not_a_document(self, tmp_path) -> None:
        (tmp_path / "nested").mkdir()
        with pytest.raises(NotFoundError):
            await LocalDocumentLoader(tmp_path).load_document("nested")

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path) -> None:
        (tmp_path / "broken.json").write_text("{", encoding="utf-8")
        with pytest.raises(DecodeError):
            await LocalDocumentLoader(tmp_path).load_document("broken.json")

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp import ClientResponseError

from src.core.config.github_config import GitHubConfig
from src.integrations.github.api import GitHubClient


@pytest.fixture
def mock_aiohttp_session():
    with patch("aiohttp.ClientSession") as mock_session_cls:
        mock_session = AsyncMock()
        mock_session_cls.return_value = mock_session

        # Mocking __aenter__ and __aexit__ for context manager usage
        mock_session.__aenter__.return_value = mock_session
        mock_session.__aexit__.return_value = None

        # Request methods return the response context manager directly
        mock_session.get = MagicMock()
        mock_session.post = MagicMock()

        def create_mock_response(status, json_data=None, text_data=None):
            mock_response = AsyncMock()
            mock_response.status = status
            mock_response.ok = 200 <= status < 300

            async def mock_json():
                return json_data

            mock_response.json = mock_json

            async def mock_text():
                return text_data if text_data is not None else ""

            mock_response.text = mock_text

            def mock_raise_for_status():
                if not mock_response.ok:
                    raise ClientResponseError(
                        request_info=MagicMock(),
                        history=(),
                        status=status,
                        message="Error",
                        headers=None,
                    )

            mock_response.raise_for_status = mock_raise_for_status

            # Async context manager for response
            mock_response.__aenter__.return_value = mock_response
            mock_response.__aexit__.return_value = None

            return mock_response

        mock_session.create_mock_response = create_mock_response

        yield mock_session


@pytest.fixture
def app_client(mock_aiohttp_session):
    """Client authenticating as a GitHub App installation."""
    app_config = GitHubConfig(app_id="42", private_key="bW9jaw==", installation_id=123)
    with (
        patch("src.integrations.github.api.GitHubClient._decode_private_key", return_value="mock_key"),
        patch("src.integrations.github.api.GitHubClient._generate_jwt", return_value="mock_jwt_token"),
    ):
        client = GitHubClient(app_config)
        client._session = mock_aiohttp_session
        yield client


@pytest.fixture
def token_client(mock_aiohttp_session):
    client = GitHubClient(GitHubConfig(token="pat-token"))
    client._session = mock_aiohttp_session
    return client


@pytest.fixture
def anonymous_client(mock_aiohttp_session):
    client = GitHubClient(GitHubConfig())
    client._session = mock_aiohttp_session
    return client


def _headers_of(mock_call) -> dict:
    return mock_call.call_args.kwargs["headers"]


@pytest.mark.asyncio
async def test_get_installation_access_token_success(app_client, mock_aiohttp_session):
    mock_response = mock_aiohttp_session.create_mock_response(201, json_data={"token": "access_token"})
    mock_aiohttp_session.post.return_value = mock_response

    token = await app_client.get_installation_access_token(12345)

    assert token == "access_token"
    assert app_client._token_cache[12345] == "access_token"


@pytest.mark.asyncio
async def test_get_installation_access_token_cached(app_client, mock_aiohttp_session):
    app_client._token_cache[12345] = "cached_token"

    token = await app_client.get_installation_access_token(12345)

    assert token == "cached_token"
    mock_aiohttp_session.post.assert_not_called()


@pytest.mark.asyncio
async def test_get_installation_access_token_failure(app_client, mock_aiohttp_session):
    mock_response = mock_aiohttp_session.create_mock_response(403, text_data="Forbidden")
    mock_aiohttp_session.post.return_value = mock_response

    token = await app_client.get_installation_access_token(12345)

    assert token is None


@pytest.mark.asyncio
async def test_app_client_reads_with_installation_token(app_client, mock_aiohttp_session):
    mock_aiohttp_session.post.return_value = mock_aiohttp_session.create_mock_response(
        201, json_data={"token": "access_token"}
    )
    mock_aiohttp_session.get.return_value = mock_aiohttp_session.create_mock_response(
        200, json_data={"full_name": "owner/repo"}
    )

    repo = await app_client.get_repository("owner/repo")

    assert repo == {"full_name": "owner/repo"}
    assert _headers_of(mock_aiohttp_session.get)["Authorization"] == "Bearer access_token"


@pytest.mark.asyncio
async def test_get_repository_failure(token_client, mock_aiohttp_session):
    mock_aiohttp_session.get.return_value = mock_aiohttp_session.create_mock_response(404)

    repo = await token_client.get_repository("owner/repo")

    assert repo is None


@pytest.mark.asyncio
async def test_get_contents_success(token_client, mock_aiohttp_session):
    payload = {"content": "e30=", "encoding": "base64"}
    mock_aiohttp_session.get.return_value = mock_aiohttp_session.create_mock_response(200, json_data=payload)

    result = await token_client.get_contents("owner/repo", "/docs/valid-platform-values.json")

    assert result == payload
    url = mock_aiohttp_session.get.call_args.args[0]
    assert url == "https://api.github.com/repos/owner/repo/contents/docs/valid-platform-values.json"
    assert _headers_of(mock_aiohttp_session.get)["Authorization"] == "Bearer pat-token"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 500])
async def test_get_contents_failure_returns_none(token_client, mock_aiohttp_session, status):
    mock_aiohttp_session.get.return_value = mock_aiohttp_session.create_mock_response(status, text_data="nope")

    assert await token_client.get_contents("owner/repo", "docs/missing.json") is None


@pytest.mark.asyncio
async def test_anonymous_reads_send_no_authorization(anonymous_client, mock_aiohttp_session):
    mock_aiohttp_session.get.return_value = mock_aiohttp_session.create_mock_response(200, json_data={})

    await anonymous_client.get_contents("owner/repo", "docs/x.json")

    assert "Authorization" not in _headers_of(mock_aiohttp_session.get)
    assert anonymous_client.can_write is False


@pytest.mark.asyncio
async def test_create_issue_success(token_client, mock_aiohttp_session):
    mock_aiohttp_session.post.return_value = mock_aiohttp_session.create_mock_response(
        201, json_data={"number": 7, "html_url": "https://github.com/owner/repo/issues/7"}
    )

    result = await token_client.create_issue("owner/repo", "title", "body", labels=["catalog-change"])

    assert result["number"] == 7
    sent = mock_aiohttp_session.post.call_args.kwargs["json"]
    assert sent == {"title": "title", "body": "body", "labels": ["catalog-change"]}


@pytest.mark.asyncio
async def test_create_issue_rejected(token_client, mock_aiohttp_session):
    mock_aiohttp_session.post.return_value = mock_aiohttp_session.create_mock_response(410, text_data="Gone")

    assert await token_client.create_issue("owner/repo", "title", "body") is None


@pytest.mark.asyncio
async def test_writes_need_credentials(anonymous_client, mock_aiohttp_session):
    assert await anonymous_client.create_issue("owner/repo", "title", "body") is None
    assert await anonymous_client.create_repository_dispatch("owner/repo", "catalog-change", {}) is False
    mock_aiohttp_session.post.assert_not_called()


@pytest.mark.asyncio
async def test_create_repository_dispatch(token_client, mock_aiohttp_session):
    mock_aiohttp_session.post.return_value = mock_aiohttp_session.create_mock_response(204)

    ok = await token_client.create_repository_dispatch("owner/repo", "update-api", {"action": "update-api"})

    assert ok is True
    assert mock_aiohttp_session.post.call_args.args[0] == "https://api.github.com/repos/owner/repo/dispatches"
    assert mock_aiohttp_session.post.call_args.kwargs["json"] == {
        "event_type": "update-api",
        "client_payload": {"action": "update-api"},
    }


@pytest.mark.asyncio
async def test_create_repository_dispatch_failure(token_client, mock_aiohttp_session):
    mock_aiohttp_session.post.return_value = mock_aiohttp_session.create_mock_response(422, text_data="bad")

    assert await token_client.create_repository_dispatch("owner/repo", "update-api", {}) is False


def test_decode_private_key_rejects_garbage():
    with pytest.raises(ValueError):
        GitHubClient._decode_private_key("%%%not-base64%%%")

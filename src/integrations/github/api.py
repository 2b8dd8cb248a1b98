import base64
import logging
import time
from typing import Any

import aiohttp
import jwt
from cachetools import TTLCache

from src.core.config import config
from src.core.config.github_config import GitHubConfig

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    A client for the parts of the GitHub REST API the catalog needs.

    Reads go through the contents API and work anonymously for public
    repositories. Writes (issues, repository dispatches) need either a
    personal access token or GitHub App credentials; in the latter case the
    client generates a JWT, exchanges it for an installation access token and
    caches the token to avoid rate limiting.
    """

    def __init__(self, github_config: GitHubConfig | None = None):
        self._config = github_config or config.github
        self._token = self._config.token or None
        self._app_id = self._config.app_id
        self._installation_id = self._config.installation_id
        self._private_key = self._decode_private_key(self._config.private_key) if self._config.uses_app_auth else ""
        self._session: aiohttp.ClientSession | None = None
        # Cache for installation tokens (TTL: 50 minutes, GitHub tokens expire in 60)
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    @property
    def api_base_url(self) -> str:
        return self._config.api_base_url.rstrip("/")

    @property
    def can_write(self) -> bool:
        """True when the client holds credentials that can create issues and dispatches."""
        return bool(self._token) or self._config.uses_app_auth

    async def _get_auth_headers(
        self,
        user_token: str | None = None,
        accept: str = "application/vnd.github.v3+json",
        require_auth: bool = False,
    ) -> dict[str, str] | None:
        """Build request headers using a provided token, the configured token or the App installation."""
        token = user_token or self._token
        if not token and self._config.uses_app_auth:
            token = await self.get_installation_access_token(self._installation_id)
        if not token:
            if require_auth:
                return None
            return {"Accept": accept}
        return {"Authorization": f"Bearer {token}", "Accept": accept}

    async def get_installation_access_token(self, installation_id: int) -> str | None:
        """
        Gets an access token for a specific installation of the GitHub App.
        Caches the token to avoid regenerating it for every request.
        """
        if installation_id in self._token_cache:
            logger.debug(f"Using cached installation token for installation_id {installation_id}.")
            return self._token_cache[installation_id]

        jwt_token = self._generate_jwt()
        headers = {
            "Authorization": f"Bearer {jwt_token}",
            "Accept": "application/vnd.github.v3+json",
        }
        url = f"{self.api_base_url}/app/installations/{installation_id}/access_tokens"

        session = await self._get_session()
        async with session.post(url, headers=headers) as response:
            if response.status == 201:
                data = await response.json()
                token = data["token"]
                self._token_cache[installation_id] = token
                logger.info(f"Generated new installation token for installation_id {installation_id}.")
                return token
            else:
                error_text = await response.text()
                logger.error(
                    f"Failed to get installation access token for installation {installation_id}. "
                    f"Status: {response.status}, Response: {error_text}"
                )
                return None

    async def get_repository(self, repo_full_name: str, user_token: str | None = None) -> dict[str, Any] | None:
        """Fetch repository metadata. Used to confirm the resolved repository exists."""
        headers = await self._get_auth_headers(user_token=user_token)
        url = f"{self.api_base_url}/repos/{repo_full_name}"
        session = await self._get_session()
        async with session.get(url, headers=headers) as response:
            if response.status == 200:
                return await response.json()
            error_text = await response.text()
            logger.warning(
                f"Repository check failed for {repo_full_name}. Status: {response.status}, Response: {error_text}"
            )
            return None

    async def get_contents(
        self, repo_full_name: str, file_path: str, user_token: str | None = None
    ) -> dict[str, Any] | None:
        """
        Fetches the contents API payload for a file.

        The payload carries the file body base64-encoded in its ``content``
        field. Returns None for any non-success status.
        """
        headers = await self._get_auth_headers(user_token=user_token)
        url = f"{self.api_base_url}/repos/{repo_full_name}/contents/{file_path.lstrip('/')}"

        session = await self._get_session()
        async with session.get(url, headers=headers) as response:
            if response.status == 200:
                logger.info(f"Successfully fetched file '{file_path}' from '{repo_full_name}'.")
                return await response.json()
            elif response.status == 404:
                logger.info(f"File '{file_path}' not found in '{repo_full_name}'.")
                return None
            else:
                error_text = await response.text()
                logger.error(
                    f"Failed to get file content for {repo_full_name}/{file_path}. "
                    f"Status: {response.status}, Response: {error_text}"
                )
                return None

    async def create_issue(
        self,
        repo_full_name: str,
        title: str,
        body: str,
        labels: list[str] | None = None,
        user_token: str | None = None,
    ) -> dict[str, Any] | None:
        """Open an issue. Returns the created issue or None on failure."""
        headers = await self._get_auth_headers(user_token=user_token, require_auth=True)
        if not headers:
            logger.error(f"No credentials available to create an issue in {repo_full_name}")
            return None

        url = f"{self.api_base_url}/repos/{repo_full_name}/issues"
        data: dict[str, Any] = {"title": title, "body": body}
        if labels:
            data["labels"] = labels

        session = await self._get_session()
        async with session.post(url, headers=headers, json=data) as response:
            if response.status == 201:
                result = await response.json()
                logger.info(f"Created issue #{result.get('number')} in {repo_full_name}")
                return result
            else:
                error_text = await response.text()
                logger.error(
                    f"Failed to create issue in {repo_full_name}. Status: {response.status}, Response: {error_text}"
                )
                return None

    async def create_repository_dispatch(
        self,
        repo_full_name: str,
        event_type: str,
        client_payload: dict[str, Any],
        user_token: str | None = None,
    ) -> bool:
        """Trigger a repository_dispatch event. GitHub answers 204 with no body."""
        headers = await self._get_auth_headers(user_token=user_token, require_auth=True)
        if not headers:
            logger.error(f"No credentials available to dispatch '{event_type}' to {repo_full_name}")
            return False

        url = f"{self.api_base_url}/repos/{repo_full_name}/dispatches"
        data = {"event_type": event_type, "client_payload": client_payload}

        session = await self._get_session()
        async with session.post(url, headers=headers, json=data) as response:
            if response.status == 204:
                logger.info(f"Dispatched '{event_type}' to {repo_full_name}")
                return True
            error_text = await response.text()
            logger.error(
                f"Failed to dispatch '{event_type}' to {repo_full_name}. "
                f"Status: {response.status}, Response: {error_text}"
            )
            return False

    async def close(self):
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    def _generate_jwt(self) -> str:
        """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
        payload = {
            "iat": int(time.time()),
            "exp": int(time.time()) + (1 * 60),
            "iss": self._app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    @staticmethod
    def _decode_private_key(encoded_key: str) -> str:
        """
        Decodes a base64-encoded private key.

        Returns:
            The decoded private key as a string.
        """
        try:
            return base64.b64decode(encoded_key).decode("utf-8")
        except Exception as e:
            logger.error(f"Failed to decode private key: {e}")
            raise ValueError("Invalid private key format. Expected base64-encoded PEM key.") from e

import asyncio
import base64
import time
from typing import Any

import aiohttp
import jwt
import structlog
from cachetools import TTLCache

from src.core.config import config
from src.core.errors import GitHubAPIError, GitHubRateLimitError, GitHubResourceNotFoundError
from src.core.utils.retry import retry_with_backoff

logger = structlog.get_logger(__name__)

DEFAULT_ACCEPT = "application/vnd.github.v3+json"
PAGE_SIZE = 100

# Connection failures only; an HTTP error response is final
TRANSIENT_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError)


class GitHubClient:
    """
    A client for interacting with the GitHub API.

    This client handles the authentication flow for a GitHub App, including
    generating a JWT and exchanging it for an installation access token.
    Tokens are cached to improve performance and avoid rate limiting.

    Failed calls raise GitHubAPIError: a review run must never be evaluated
    against partial data.
    """

    def __init__(self, api_base_url: str | None = None):
        self._private_key = self._decode_private_key()
        self._app_id = config.github.app_id
        self._api_base_url = (api_base_url or config.github.api_base_url).rstrip("/")
        self._session: aiohttp.ClientSession | None = None
        # Cache for installation tokens (TTL: 50 minutes, GitHub tokens expire in 60)
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    async def _get_auth_headers(self, installation_id: int, accept: str = DEFAULT_ACCEPT) -> dict[str, str]:
        token = await self.get_installation_access_token(installation_id)
        return {"Authorization": f"Bearer {token}", "Accept": accept}

    async def get_installation_access_token(self, installation_id: int) -> str:
        """
        Gets an access token for a specific installation of the GitHub App.
        Caches the token to avoid regenerating it for every request.
        """
        if installation_id in self._token_cache:
            logger.debug("installation_token_cached", installation_id=installation_id)
            return self._token_cache[installation_id]

        jwt_token = self._generate_jwt()
        headers = {"Authorization": f"Bearer {jwt_token}", "Accept": DEFAULT_ACCEPT}
        url = f"{self._api_base_url}/app/installations/{installation_id}/access_tokens"

        session = await self._get_session()
        async with session.post(url, headers=headers) as response:
            if response.status != 201:
                await self._raise_for_response(response, f"installation token for {installation_id}")
            data = await response.json()

        token = data["token"]
        self._token_cache[installation_id] = token
        logger.info("installation_token_generated", installation_id=installation_id)
        return token

    @retry_with_backoff(max_retries=3, initial_delay=0.5, exceptions=TRANSIENT_ERRORS)
    async def _request(
        self,
        method: str,
        path: str,
        installation_id: int,
        *,
        accept: str = DEFAULT_ACCEPT,
        expected: tuple[int, ...] = (200,),
        raw: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Perform one authenticated call and return its decoded body."""
        headers = await self._get_auth_headers(installation_id, accept=accept)
        url = path if path.startswith("http") else f"{self._api_base_url}{path}"

        session = await self._get_session()
        async with session.request(method, url, headers=headers, **kwargs) as response:
            if response.status not in expected:
                await self._raise_for_response(response, f"{method} {path}")
            if response.status == 204:
                return None
            if raw:
                return await response.text()
            return await response.json()

    @retry_with_backoff(max_retries=3, initial_delay=0.5, exceptions=TRANSIENT_ERRORS)
    async def _paginate(self, path: str, installation_id: int, key: str | None = None) -> list[dict[str, Any]]:
        """Collect every page of a list endpoint by following the Link header."""
        headers = await self._get_auth_headers(installation_id)
        url: str | None = f"{self._api_base_url}{path}"
        params: dict[str, Any] | None = {"per_page": PAGE_SIZE}
        items: list[dict[str, Any]] = []

        session = await self._get_session()
        while url:
            async with session.get(url, headers=headers, params=params) as response:
                if response.status != 200:
                    await self._raise_for_response(response, f"GET {path}")
                data = await response.json()
                next_link = response.links.get("next")
            items.extend(data[key] if key else data)
            url = str(next_link["url"]) if next_link else None
            # The next link already carries the query string
            params = None

        logger.debug("github_list_fetched", path=path, count=len(items))
        return items

    @staticmethod
    async def _raise_for_response(response: aiohttp.ClientResponse, action: str) -> None:
        error_text = await response.text()
        logger.error("github_api_error", action=action, status=response.status, response=error_text)
        if response.status == 404:
            raise GitHubResourceNotFoundError(f"{action}: {error_text}")
        if response.status == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            raise GitHubRateLimitError(f"{action}: {error_text}")
        raise GitHubAPIError(response.status, f"{action}: {error_text}")

    async def get_file_content(self, repo_full_name: str, file_path: str, installation_id: int) -> str | None:
        """
        Fetches the content of a file from a repository. None if the file does not exist.
        """
        try:
            content = await self._request(
                "GET",
                f"/repos/{repo_full_name}/contents/{file_path}",
                installation_id,
                accept="application/vnd.github.raw",
                raw=True,
            )
        except GitHubResourceNotFoundError:
            logger.info("file_not_found", repo=repo_full_name, path=file_path)
            return None
        logger.info("file_fetched", repo=repo_full_name, path=file_path)
        return content

    async def get_pull_request_files(self, repo: str, pr_number: int, installation_id: int) -> list[dict[str, Any]]:
        """Get every file changed in a pull request."""
        return await self._paginate(f"/repos/{repo}/pulls/{pr_number}/files", installation_id)

    async def get_pull_request_reviews(self, repo: str, pr_number: int, installation_id: int) -> list[dict[str, Any]]:
        """Get every review of a pull request."""
        return await self._paginate(f"/repos/{repo}/pulls/{pr_number}/reviews", installation_id)

    async def list_team_members(self, org: str, team_slug: str, installation_id: int) -> list[dict[str, Any]]:
        """Get every member of an organization team."""
        return await self._paginate(f"/orgs/{org}/teams/{team_slug}/members", installation_id)

    async def request_reviewers(
        self, repo: str, pr_number: int, users: list[str], teams: list[str], installation_id: int
    ) -> dict[str, Any]:
        """Request reviews from users and teams."""
        data = {"reviewers": users, "team_reviewers": teams}
        result = await self._request(
            "POST",
            f"/repos/{repo}/pulls/{pr_number}/requested_reviewers",
            installation_id,
            expected=(200, 201),
            json=data,
        )
        logger.info("reviewers_requested", repo=repo, pr_number=pr_number, users=users, teams=teams)
        return result

    async def get_check_runs(self, repo: str, sha: str, installation_id: int) -> list[dict[str, Any]]:
        """Get check runs for a commit."""
        return await self._paginate(f"/repos/{repo}/commits/{sha}/check-runs", installation_id, key="check_runs")

    async def create_check_run(self, repo: str, data: dict[str, Any], installation_id: int) -> dict[str, Any]:
        """Create a check run."""
        result = await self._request(
            "POST", f"/repos/{repo}/check-runs", installation_id, expected=(201,), json=data
        )
        logger.info("check_run_created", repo=repo, check_run_id=result.get("id"))
        return result

    async def update_check_run(
        self, repo: str, check_run_id: int, data: dict[str, Any], installation_id: int
    ) -> dict[str, Any]:
        """Update a check run."""
        result = await self._request(
            "PATCH", f"/repos/{repo}/check-runs/{check_run_id}", installation_id, json=data
        )
        logger.info("check_run_updated", repo=repo, check_run_id=check_run_id)
        return result

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
            "exp": int(time.time()) + (1 * 60),  # X * minutes expiration
            "iss": self._app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    @staticmethod
    def _decode_private_key() -> str:
        """
        Decodes the base64-encoded private key from the configuration.

        Returns:
            The decoded private key as a string.
        """
        try:
            # Decode the base64-encoded private key
            decoded_key = base64.b64decode(config.github.private_key).decode("utf-8")
            return decoded_key
        except Exception as e:
            logger.error("private_key_decode_failed", error=str(e))
            raise ValueError("Invalid private key format. Expected base64-encoded PEM key.") from e


# Global instance
github_client = GitHubClient()

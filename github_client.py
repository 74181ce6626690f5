"""
GitHub API client wrapper for organization repositories and Actions runs.
"""
import logging
from datetime import datetime, timezone

import httpx

from models import RateLimitInfo

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubResponseError(Exception):
    """GitHub answered, but with a body that is not the expected JSON shape."""


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def rate_limit_from_headers(headers: httpx.Headers) -> RateLimitInfo | None:
    """
    Read the rate-limit snapshot from response headers.

    Returns:
        RateLimitInfo, or None if the response carries no (valid) snapshot
    """
    try:
        remaining = int(headers["X-RateLimit-Remaining"])
        limit = int(headers["X-RateLimit-Limit"])
        reset = int(headers["X-RateLimit-Reset"])
    except (KeyError, ValueError):
        return None
    return RateLimitInfo(
        remaining=remaining,
        limit=limit,
        reset_at=datetime.fromtimestamp(reset, tz=timezone.utc),
    )


class GitHubClient:
    """Lightweight wrapper around GitHub REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: API root, overridable for GitHub Enterprise
            transport: Optional httpx transport (used by tests)
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.timeout = timeout
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    async def get(self, endpoint: str, params: dict | None = None) -> tuple[dict | list, RateLimitInfo | None]:
        """Make GET request to GitHub API, returning the body and rate-limit snapshot."""
        url = f"{self.base_url}{endpoint}"
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            response = await client.get(url, headers=self.headers, params=params or {})
            response.raise_for_status()
            try:
                body = response.json()
            except ValueError as e:
                raise GitHubResponseError(f"non-JSON response from {url}") from e
            return body, rate_limit_from_headers(response.headers)

    async def list_org_repos(self, org: str, per_page: int = 100) -> tuple[list[dict], RateLimitInfo | None]:
        """
        Fetch every repository in an organization.

        Args:
            org: Organization login
            per_page: Page size (max 100)

        Returns:
            Normalized repo dicts (id, name, owner, pushed_at, updated_at) and
            the rate-limit snapshot of the last page fetched
        """
        endpoint = f"/orgs/{org}/repos"
        result = []
        rate_limit = None
        page = 1

        while True:
            params = {"type": "all", "per_page": per_page, "page": page}
            repos, snapshot = await self.get(endpoint, params)
            if not isinstance(repos, list):
                raise GitHubResponseError(f"expected a list of repositories for {org}")
            rate_limit = snapshot or rate_limit

            for repo in repos:
                try:
                    result.append({
                        "id": repo["id"],
                        "name": repo["name"],
                        "owner": (repo.get("owner") or {}).get("login", org),
                        "pushed_at": parse_timestamp(repo.get("pushed_at")),
                        "updated_at": parse_timestamp(repo.get("updated_at")),
                    })
                except (KeyError, TypeError, AttributeError, ValueError) as e:
                    logger.debug("Skipping malformed repository entry in %s: %r", org, e)

            if len(repos) < per_page:
                break
            page += 1

        return result, rate_limit

    async def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        per_page: int = 50,
    ) -> tuple[list[dict], RateLimitInfo | None]:
        """
        Fetch the most recent workflow runs of a repository (one page).

        Args:
            owner: Repository owner
            repo: Repository name
            per_page: Number of runs to fetch (max 100)

        Returns:
            Normalized run dicts, newest first, and the rate-limit snapshot
        """
        endpoint = f"/repos/{owner}/{repo}/actions/runs"
        data, rate_limit = await self.get(endpoint, {"per_page": per_page})
        if not isinstance(data, dict):
            raise GitHubResponseError(f"expected a workflow run listing for {owner}/{repo}")

        result = []
        for run in data.get("workflow_runs") or []:
            try:
                result.append({
                    "id": int(run["id"]),
                    "name": run.get("name") or "",
                    "run_number": run.get("run_number"),
                    "status": run.get("status"),
                    "conclusion": run.get("conclusion"),
                    "head_branch": run.get("head_branch"),
                    "run_started_at": parse_timestamp(run.get("run_started_at")),
                    "created_at": parse_timestamp(run.get("created_at")),
                    "updated_at": parse_timestamp(run.get("updated_at")),
                    "html_url": run.get("html_url"),
                })
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                logger.debug("Skipping malformed workflow run in %s/%s: %r", owner, repo, e)
        return result, rate_limit

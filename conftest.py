"""
Shared fixtures: a fake GitHub client and run/repo builders.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import httpx
import pytest

from models import RateLimitInfo

TZ = ZoneInfo("Asia/Jakarta")
NOW = datetime(2024, 5, 15, 12, 0, 0, tzinfo=TZ)


def rate(remaining: int, limit: int = 5000) -> RateLimitInfo:
    return RateLimitInfo(remaining=remaining, limit=limit, reset_at=datetime(2024, 5, 15, 6, 0, tzinfo=timezone.utc))


def make_repo(name: str, pushed_at: datetime | None = None, updated_at: datetime | None = None, owner: str = "acme") -> dict:
    return {"id": sum(map(ord, name)), "name": name, "owner": owner, "pushed_at": pushed_at, "updated_at": updated_at}


def make_run(run_id: int, started: datetime | None = None, **overrides) -> dict:
    run = {
        "id": run_id,
        "name": "CI",
        "run_number": run_id,
        "status": "completed",
        "conclusion": "success",
        "head_branch": "main",
        "run_started_at": started,
        "created_at": started,
        "updated_at": started + timedelta(minutes=2) if started else None,
        "html_url": f"https://github.com/acme/app/actions/runs/{run_id}",
    }
    run.update(overrides)
    return run


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, repos: dict | None = None, runs: dict | None = None, failing: tuple = ()):
        """
        Args:
            repos: {org: (repo_list, rate_limit)}
            runs: {(org, repo): (run_list, rate_limit)}
            failing: orgs or (org, repo) pairs whose listing raises
        """
        self.repos = repos or {}
        self.runs = runs or {}
        self.failing = set(failing)
        self.calls = []

    async def list_org_repos(self, org: str, per_page: int = 100):
        self.calls.append(org)
        if org in self.failing:
            raise httpx.ConnectError(f"cannot list {org}")
        return self.repos.get(org, ([], None))

    async def list_workflow_runs(self, owner: str, repo: str, per_page: int = 50):
        self.calls.append((owner, repo))
        if (owner, repo) in self.failing:
            raise httpx.ConnectError(f"cannot list {owner}/{repo}")
        return self.runs.get((owner, repo), ([], None))


@pytest.fixture
def now() -> datetime:
    return NOW

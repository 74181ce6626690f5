"""
RunCollector - Walks organizations and repositories collecting workflow runs.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from formatting import NOT_AVAILABLE, run_duration, run_started
from github_client import GitHubResponseError
from models import Job, RateLimitInfo
from status import normalize_status
from window import TimeWindow, in_window

logger = logging.getLogger(__name__)

RUN_URL = "https://github.com/{org}/{repo}/actions/runs/{run_id}"

# Failures that cost one organization or repository, not the whole cycle
FETCH_ERRORS = (httpx.HTTPError, GitHubResponseError)


class CollectionError(Exception):
    """Raised when a fetch cycle cannot proceed at all."""


@dataclass(frozen=True)
class UnitResult:
    """Outcome of one organization listing or one repository's run listing."""
    organization: str
    repository: str | None = None
    jobs: tuple[Job, ...] = ()
    skipped_reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


@dataclass
class CollectionResult:
    """Everything gathered during one fetch cycle."""
    units: list[UnitResult] = field(default_factory=list)
    rate_limit: RateLimitInfo | None = None

    @property
    def jobs(self) -> list[Job]:
        return [job for unit in self.units for job in unit.jobs]

    @property
    def skipped(self) -> list[UnitResult]:
        return [unit for unit in self.units if unit.skipped]


def filter_repositories(repos: list[dict], window: TimeWindow) -> list[dict]:
    """
    Keep repositories with recent activity inside the window.

    Uses pushed_at (which moves for commits on any branch) and falls back to
    updated_at. Repositories with neither timestamp are dropped.

    Args:
        repos: Normalized repo dicts from GitHubClient.list_org_repos
        window: Resolved time window

    Returns:
        Matching repos in listing order
    """
    filtered = []
    for repo in repos:
        check_time = repo.get("pushed_at") or repo.get("updated_at")
        if check_time is not None and in_window(check_time, window):
            filtered.append(repo)
    return filtered


def build_job(org: str, repo_name: str, run: dict, now: datetime) -> Job:
    """Project a normalized workflow run into a dashboard Job."""
    name = run.get("name") or ""
    if run.get("run_number") is not None:
        name = f"{name} #{run['run_number']}"

    return Job(
        id=f"JOB-{run['id']:06d}",
        name=name,
        status=normalize_status(run.get("status"), run.get("conclusion")),
        pipeline=repo_name,
        branch=run.get("head_branch") or NOT_AVAILABLE,
        duration=run_duration(run, now),
        started=run_started(run, now),
        organization=org,
        run_id=run["id"],
        html_url=run.get("html_url") or RUN_URL.format(org=org, repo=repo_name, run_id=run["id"]),
        created_at=run.get("created_at") or now,
    )


class RunCollector:
    """Collects workflow runs across organizations for one dashboard cycle."""

    def __init__(self, github_client, organizations: list[str], run_page_size: int = 50):
        """
        Initialize RunCollector.

        Args:
            github_client: GitHubClient (or anything with the same list methods)
            organizations: Ordered organization logins to walk
            run_page_size: Number of recent runs to fetch per repository
        """
        self.github = github_client
        self.organizations = list(organizations)
        self.run_page_size = run_page_size

    async def collect(self, window: TimeWindow, now: datetime) -> CollectionResult:
        """
        Run one fetch cycle.

        Organizations, repositories and runs are visited sequentially in
        order. A failing organization or repository is recorded as a skipped
        unit and the cycle moves on.

        Args:
            window: Resolved time window
            now: Current instant, used for durations and relative times

        Returns:
            CollectionResult with per-unit outcomes and the last rate-limit snapshot

        Raises:
            CollectionError: The first API call of the cycle failed
        """
        result = CollectionResult()
        first_call = True

        logger.info("📅 Fetching workflow runs for period: %s (since %s)", window.period.value, window.start)

        for org in self.organizations:
            logger.info("📦 Fetching repositories for organization: %s", org)
            try:
                repos, rate_limit = await self.github.list_org_repos(org)
            except FETCH_ERRORS as e:
                if first_call:
                    raise CollectionError(f"listing repositories for {org} failed: {e}") from e
                logger.warning("❌ Error listing repositories for organization %s: %s", org, e)
                result.units.append(UnitResult(org, skipped_reason=f"repository listing failed: {e}"))
                continue
            first_call = False
            result.rate_limit = rate_limit or result.rate_limit
            self._log_rate_limit(rate_limit)

            filtered = filter_repositories(repos, window)
            logger.info(
                "✅ %d repositories in %s, %d updated %s",
                len(repos), org, len(filtered), window.label,
            )
            result.units.append(UnitResult(org))

            for i, repo in enumerate(filtered, 1):
                logger.info("   [%d/%d] Fetching workflow runs for %s/%s", i, len(filtered), org, repo["name"])
                unit = await self._collect_repo(org, repo["name"], window, now, result)
                result.units.append(unit)

            collected = sum(len(unit.jobs) for unit in result.units if unit.organization == org)
            logger.info("Completed organization %s: %d jobs", org, collected)

        logger.info("📊 Total jobs collected from all organizations: %d", len(result.jobs))
        return result

    async def _collect_repo(
        self,
        org: str,
        repo_name: str,
        window: TimeWindow,
        now: datetime,
        result: CollectionResult,
    ) -> UnitResult:
        """Fetch and project one repository's runs."""
        try:
            runs, rate_limit = await self.github.list_workflow_runs(org, repo_name, per_page=self.run_page_size)
        except FETCH_ERRORS as e:
            logger.warning("   ❌ Error fetching workflow runs for %s/%s: %s", org, repo_name, e)
            return UnitResult(org, repo_name, skipped_reason=f"run listing failed: {e}")
        result.rate_limit = rate_limit or result.rate_limit
        logger.info("   Found %d workflow runs in %s/%s", len(runs), org, repo_name)
        self._log_rate_limit(rate_limit)

        jobs = []
        for run in runs:
            run_time = run.get("run_started_at") or run.get("created_at")
            if run_time is None:
                logger.debug("   Skipping run %s in %s/%s: no timestamp", run.get("id"), org, repo_name)
                continue
            if not in_window(run_time, window):
                continue
            try:
                jobs.append(build_job(org, repo_name, run, now))
            except ValueError as e:
                logger.debug("   Skipping run %s in %s/%s: %s", run.get("id"), org, repo_name, e)

        return UnitResult(org, repo_name, jobs=tuple(jobs))

    @staticmethod
    def _log_rate_limit(rate_limit: RateLimitInfo | None) -> None:
        if rate_limit is not None:
            logger.info(
                "   Rate limit: %d/%d remaining (resets at %s)",
                rate_limit.remaining, rate_limit.limit, rate_limit.reset_at,
            )

"""
Workflow Run Dashboard - terminal view.
"""
import asyncio
import logging
import sys
from datetime import datetime

from board import build_dashboard
from config import Settings
from github_client import GitHubClient
from run_collector import RunCollector
from window import normalize_period


async def main(period: str = "week", as_of: datetime | None = None):
    """
    Fetch once and print the dashboard.

    Args:
        period: today, week or month
        as_of: Virtual "current time" (default: now in the configured timezone)
    """
    settings = Settings.from_env()
    as_of = as_of or settings.now()
    period = normalize_period(period)

    print("=" * 100)
    print("Workflow Run Dashboard")
    print(f"Organizations: {', '.join(settings.organizations)}")
    print(f"Period: {period.value}  Time: {as_of.strftime('%Y-%m-%d %H:%M:%S %Z')}")
    print("=" * 100 + "\n")

    github = GitHubClient(settings.github_token)
    collector = RunCollector(github, settings.organizations, settings.runs_per_repo)
    dashboard = await build_dashboard(collector, period, as_of)

    stats = dashboard.stats
    print(
        f"success {stats.success}  failed {stats.failed}  running {stats.running}  "
        f"pending {stats.pending}  total {stats.total}\n"
    )

    print(f"{'Job':<12} {'Status':<8} {'Repository':<24} {'Branch':<18} {'Duration':<12} {'Started'}")
    print("-" * 100)

    for job in dashboard.jobs:
        repo = f"{job.organization}/{job.pipeline}"[:22]
        branch = job.branch[:16]
        print(f"{job.id:<12} {job.status:<8} {repo:<24} {branch:<18} {job.duration:<12} {job.started}")

    print("=" * 100)

    rate = dashboard.rate_limit
    print(f"\nAPI Rate Limit: {rate.remaining}/{rate.limit} remaining")
    print(f"Resets at: {rate.reset_at.astimezone(settings.reference_zone()).strftime('%H:%M:%S')}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "week"))

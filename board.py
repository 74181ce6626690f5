"""
Board - Dashboard aggregation and response assembly.
"""
import logging
import time
from datetime import datetime

from models import DashboardResponse, DashboardStats, Job, RateLimitInfo
from run_collector import RunCollector
from status import FAILED, PENDING, RUNNING, SUCCESS
from window import Period, resolve_window

logger = logging.getLogger(__name__)


class Board:
    """Computes dashboard stats and ordering from collected jobs."""

    def __init__(self, jobs: list[Job], rate_limit: RateLimitInfo | None = None, as_of: datetime | None = None):
        """
        Initialize Board.

        Args:
            jobs: Jobs gathered during one fetch cycle, in collection order
            rate_limit: Last rate-limit snapshot observed, if any
            as_of: Current instant (for the default rate-limit reset time)
        """
        self.jobs = jobs
        self.rate_limit = rate_limit
        self.as_of = as_of or datetime.now().astimezone()

    def sort_jobs(self) -> list[Job]:
        """Jobs newest first; ties keep collection order."""
        return sorted(self.jobs, key=lambda job: job.created_at, reverse=True)

    def calculate_stats(self) -> DashboardStats:
        """Count jobs per status."""
        stats = DashboardStats(total=len(self.jobs))
        for job in self.jobs:
            if job.status == SUCCESS:
                stats.success += 1
            elif job.status == FAILED:
                stats.failed += 1
            elif job.status == RUNNING:
                stats.running += 1
            elif job.status == PENDING:
                stats.pending += 1
        return stats

    def build_response(self) -> DashboardResponse:
        """Assemble the payload served by /api/dashboard."""
        return DashboardResponse(
            stats=self.calculate_stats(),
            jobs=self.sort_jobs(),
            rate_limit=self.rate_limit or RateLimitInfo.default(self.as_of),
        )


async def build_dashboard(collector: RunCollector, period: Period | str | None, now: datetime) -> DashboardResponse:
    """
    Run a full fetch cycle and assemble the dashboard.

    Args:
        collector: RunCollector configured with client and organizations
        period: Requested period (unknown values mean week)
        now: Current instant in the reference timezone

    Returns:
        DashboardResponse

    Raises:
        CollectionError: The cycle could not start
    """
    window = resolve_window(period, now)
    started = time.monotonic()

    result = await collector.collect(window, now)
    response = Board(result.jobs, result.rate_limit, as_of=now).build_response()

    stats = response.stats
    logger.info(
        "📈 Dashboard stats: Success=%d, Failed=%d, Running=%d, Pending=%d, Total=%d (%d units skipped, took %.2fs)",
        stats.success, stats.failed, stats.running, stats.pending, stats.total,
        len(result.skipped), time.monotonic() - started,
    )
    return response

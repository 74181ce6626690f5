"""
Formatting helpers for job durations and relative start times.
"""
from datetime import datetime

NOT_AVAILABLE = "N/A"


def pluralize(n: int) -> str:
    return "" if n == 1 else "s"


def format_duration(start: datetime, end: datetime) -> str:
    """Format elapsed time as "1h 2m 3s", "2m 3s" or "3s" (truncated)."""
    elapsed = max(int((end - start).total_seconds()), 0)
    hours = elapsed // 3600
    minutes = (elapsed // 60) % 60
    seconds = elapsed % 60

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_time_ago(then: datetime, now: datetime) -> str:
    """Format how long ago `then` was, e.g. "3 hours ago" or "just now"."""
    elapsed = int((now - then).total_seconds())
    days = elapsed // 86400
    hours = elapsed // 3600
    minutes = elapsed // 60

    if days > 0:
        return f"{days} day{pluralize(days)} ago"
    if hours > 0:
        return f"{hours} hour{pluralize(hours)} ago"
    if minutes > 0:
        return f"{minutes} minute{pluralize(minutes)} ago"
    return "just now"


def run_duration(run: dict, now: datetime) -> str:
    """
    Duration of a workflow run.

    Uses run_started_at..updated_at when both are known, otherwise
    created_at..updated_at, with `now` standing in for a missing end.

    Args:
        run: Normalized run dict from GitHubClient.list_workflow_runs
        now: Current instant

    Returns:
        Formatted duration, or "N/A" when the run has no start time
    """
    started_at = run.get("run_started_at")
    created_at = run.get("created_at")
    updated_at = run.get("updated_at")

    if started_at and updated_at:
        return format_duration(started_at, updated_at)
    if created_at:
        return format_duration(created_at, updated_at or now)
    return NOT_AVAILABLE


def run_started(run: dict, now: datetime) -> str:
    """Relative start time of a workflow run, or "N/A"."""
    started_at = run.get("run_started_at") or run.get("created_at")
    if started_at is None:
        return NOT_AVAILABLE
    return format_time_ago(started_at, now)

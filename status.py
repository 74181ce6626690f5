"""
Status - Map GitHub run status/conclusion pairs onto dashboard statuses.
"""
SUCCESS = "success"
FAILED = "failed"
RUNNING = "running"
PENDING = "pending"


def normalize_status(status: str | None, conclusion: str | None = None) -> str:
    """
    Normalize a workflow run's state.

    Completed runs are `success` only on a success conclusion; every other
    conclusion, including a missing one, counts as `failed`.

    Args:
        status: Raw run status (e.g. "completed", "in_progress")
        conclusion: Raw run conclusion, if any

    Returns:
        One of success, failed, running, pending
    """
    status = (status or "").lower()
    conclusion = (conclusion or "").lower()

    if status == "completed":
        if conclusion == "success":
            return SUCCESS
        return FAILED
    if status in ("in_progress", "queued"):
        return RUNNING
    return PENDING

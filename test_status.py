"""
Tests for mapping run status and conclusion onto dashboard statuses.
"""
import pytest

from status import normalize_status


@pytest.mark.parametrize("conclusion, expected", [
    ("success", "success"),
    ("SUCCESS", "success"),
    ("failure", "failed"),
    ("cancelled", "failed"),
    ("timed_out", "failed"),
    ("skipped", "failed"),
    (None, "failed"),
])
def test_completed_runs(conclusion, expected):
    assert normalize_status("completed", conclusion) == expected


@pytest.mark.parametrize("status", ["in_progress", "queued", "IN_PROGRESS"])
def test_active_runs_are_running(status):
    assert normalize_status(status, None) == "running"


@pytest.mark.parametrize("status", ["waiting", "requested", "pending", "", None])
def test_everything_else_is_pending(status):
    assert normalize_status(status, "success") == "pending"

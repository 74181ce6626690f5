"""
Tests for aggregation and dashboard assembly.
"""
from datetime import timedelta

import pytest
from pydantic import ValidationError

from board import Board, build_dashboard
from conftest import NOW, FakeGitHub, make_repo, make_run, rate
from models import Job
from run_collector import CollectionError, RunCollector


def make_job(run_id: int, status: str, age_minutes: int) -> Job:
    return Job(
        id=f"JOB-{run_id:06d}",
        name="CI",
        status=status,
        pipeline="app",
        branch="main",
        duration="1s",
        started="just now",
        organization="acme",
        run_id=run_id,
        html_url="https://example.invalid",
        created_at=NOW - timedelta(minutes=age_minutes),
    )


JOBS = [
    make_job(1, "success", 30),
    make_job(2, "failed", 5),
    make_job(3, "running", 60),
    make_job(4, "success", 5),
    make_job(5, "pending", 1),
]


def test_sort_newest_first_with_stable_ties():
    assert [job.run_id for job in Board(JOBS, as_of=NOW).sort_jobs()] == [5, 2, 4, 1, 3]


def test_calculate_stats():
    stats = Board(JOBS, as_of=NOW).calculate_stats()
    assert stats.model_dump() == {"success": 2, "failed": 1, "running": 1, "pending": 1, "total": 5}


def test_aggregation_is_idempotent():
    first = Board(JOBS, as_of=NOW).build_response()
    second = Board(JOBS, as_of=NOW).build_response()
    assert first == second
    again = Board(first.jobs, as_of=NOW).build_response()
    assert again.stats == first.stats
    assert again.jobs == first.jobs


def test_empty_board():
    response = Board([], as_of=NOW).build_response()
    assert response.stats.total == 0
    assert response.jobs == []


def test_default_rate_limit_when_none_observed():
    response = Board(JOBS, as_of=NOW).build_response()
    assert response.rate_limit.remaining == 5000
    assert response.rate_limit.limit == 5000
    assert response.rate_limit.reset_at == NOW + timedelta(hours=1)


def test_observed_rate_limit_is_kept():
    response = Board(JOBS, rate(42), as_of=NOW).build_response()
    assert response.rate_limit.remaining == 42


@pytest.mark.asyncio
async def test_build_dashboard_end_to_end():
    recent = NOW - timedelta(hours=1)
    github = FakeGitHub(
        repos={"acme": ([make_repo("app", pushed_at=recent)], rate(70))},
        runs={("acme", "app"): ([
            make_run(10, recent - timedelta(minutes=10), status="in_progress", conclusion=None),
            make_run(11, recent, conclusion="failure"),
        ], rate(69))},
    )
    response = await build_dashboard(RunCollector(github, ["acme"]), "bogus", NOW)

    assert [job.run_id for job in response.jobs] == [11, 10]
    assert response.stats.failed == 1
    assert response.stats.running == 1
    assert response.rate_limit.remaining == 69


@pytest.mark.asyncio
async def test_build_dashboard_propagates_hard_failure():
    github = FakeGitHub(failing=("acme",))
    with pytest.raises(CollectionError):
        await build_dashboard(RunCollector(github, ["acme"]), "week", NOW)


def test_job_status_is_a_closed_set():
    with pytest.raises(ValidationError):
        make_job(6, "skipped", 1)

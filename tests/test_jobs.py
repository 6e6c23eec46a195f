"""Test cooperative scheduling and jobs."""

from unittest.mock import patch

import pytest

from revview.errors import BadRevision
from revview.jobs import Job, JobStatus, submit_for_session
from revview.rev import ComparisonSpec, Local, Stage
from revview.session import DiffSession


def test_scheduler_runs_in_order(scheduler):
    """Test FIFO stepping."""
    ran = []
    scheduler.schedule(ran.append, 1)
    scheduler.schedule(ran.append, 2)
    assert len(scheduler) == 2
    assert scheduler.step()
    assert ran == [1]
    assert scheduler.run_pending() == 1
    assert ran == [1, 2]
    assert not scheduler.step()


def test_run_pending_includes_newly_queued(scheduler):
    """Test that callbacks queued while draining also run."""
    ran = []
    scheduler.schedule(lambda: scheduler.schedule(ran.append, 'nested'))
    assert scheduler.run_pending() == 2
    assert ran == ['nested']


def test_job_runs_on_later_turn(scheduler):
    """Test that a job doesn't run inline and reports on a separate turn."""
    done = []
    job = Job(scheduler, lambda x: x * 2, 21).start(done.append)
    assert job.status == JobStatus.PENDING
    scheduler.step()
    assert job.status == JobStatus.SUCCESS
    assert job.result == 42
    assert done == []
    scheduler.step()
    assert done == [job]
    assert job.done


def test_job_records_errors(scheduler):
    """Test that a failing job is marked as errored."""
    def fail():
        raise BadRevision("Bad revision: 'x'", 'x')

    job = Job(scheduler, fail).start()
    scheduler.run_pending()
    assert job.status == JobStatus.ERROR
    assert isinstance(job.error, BadRevision)


def test_job_unexpected_error_marks_done(scheduler):
    """Test that an unexpected exception propagates but still ends the job."""
    done = []

    def fail():
        raise OSError("git not found")

    job = Job(scheduler, fail).start(done.append)
    with pytest.raises(OSError):
        scheduler.step()
    assert job.status == JobStatus.ERROR
    assert job.done
    assert done == []


def test_submit_for_session_reports_errors(scheduler, registry, repo):
    """Test that a failed job for a live session isn't silently dropped."""
    session = DiffSession(repo, ComparisonSpec(Stage(0), Local()))
    registry.add(session)

    def fail():
        raise BadRevision("Bad revision: 'x'", 'x')

    with patch('revview.jobs.err') as err:
        submit_for_session(scheduler, registry, session, fail, apply=lambda result: None)
        scheduler.run_pending()
    err.assert_called_once_with("Bad revision: 'x'")


def test_submit_for_session_checks_liveness_at_completion(scheduler, registry, repo):
    """Test that results are dropped for sessions disposed mid-flight."""
    session = DiffSession(repo, ComparisonSpec(Stage(0), Local()))
    registry.add(session)
    applied = []
    submit_for_session(scheduler, registry, session, lambda: 'result', apply=applied.append)
    scheduler.step()
    registry.dispose(session)
    scheduler.run_pending()
    assert applied == []

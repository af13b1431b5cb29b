# tests/test_qc_gate.py
"""QC sign-off: role gate first, then the state graph."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime
from cleanup_tracker.errors import Forbidden, IllegalTransition
from cleanup_tracker.models.enums import JobStatus, Role
from cleanup_tracker.models.job import Job
from cleanup_tracker.services import job_lifecycle
from cleanup_tracker.services.job_lifecycle import Actor
from cleanup_tracker.services.qc_gate import QC_ROLES, authorize_qc, record_decision

NOW = datetime(2026, 3, 2, 12, 0, 0)

DETAILER = Actor(id=11, role=Role.DETAILER, name="Alfred", employee_number="DET001")
MANAGER = Actor(id=1, role=Role.MANAGER, name="Joe Gallant", employee_number="MGR001")
SALES = Actor(id=21, role=Role.SALESPERSON, name="Sarah Johnson", employee_number="SALES001")


def make_job(status, **kwargs):
    return Job(id=7, status=status, **kwargs)


class TestAuthorizeQc:
    def test_qc_roles(self):
        assert QC_ROLES == {Role.MANAGER, Role.SALESPERSON}

    @pytest.mark.parametrize("actor", [MANAGER, SALES])
    def test_reviewers_allowed(self, actor):
        authorize_qc(actor)

    def test_detailer_denied(self):
        with pytest.raises(Forbidden):
            authorize_qc(DETAILER)


class TestDetailerNeverSignsOff:
    @pytest.mark.parametrize("status", list(JobStatus))
    @pytest.mark.parametrize("passed", [True, False])
    def test_forbidden_in_every_status(self, status, passed):
        job = make_job(status, technician_id=DETAILER.id, assigned_technician_ids=[DETAILER.id])

        with pytest.raises(Forbidden):
            job_lifecycle.qc_decision(job, DETAILER, passed=passed, now=NOW)

        assert job.status == status
        assert job.qc_completed_by is None


class TestReviewerLegality:
    @pytest.mark.parametrize("status", [JobStatus.QC_REQUIRED, JobStatus.COMPLETED])
    def test_legal_sources(self, status):
        job = make_job(status, start_time=datetime(2026, 3, 2, 11, 0, 0), end_time=datetime(2026, 3, 2, 11, 30, 0))
        job_lifecycle.qc_decision(job, SALES, passed=True, now=NOW)
        assert job.status == JobStatus.QC_APPROVED

    @pytest.mark.parametrize("status", [
        JobStatus.PENDING, JobStatus.IN_PROGRESS, JobStatus.PAUSED,
        JobStatus.QC_APPROVED, JobStatus.CANCELLED,
    ])
    def test_illegal_sources(self, status):
        job = make_job(status)
        with pytest.raises(IllegalTransition) as exc:
            job_lifecycle.qc_decision(job, MANAGER, passed=True, now=NOW)
        assert exc.value.current_status == status
        assert exc.value.requested_status == JobStatus.QC_APPROVED
        assert job.status == status


class TestRecordDecision:
    def test_stamps_reviewer(self):
        job = make_job(JobStatus.QC_REQUIRED)
        record_decision(job, SALES, passed=False, notes="Missed the door jambs", now=NOW)

        assert job.qc_completed_by == "Sarah Johnson"
        assert job.qc_completed_by_id == 21
        assert job.qc_completed_at == NOW
        assert job.qc_notes == "Missed the door jambs"
        assert job.qc_employee_number == "SALES001"

    def test_missing_notes_stored_as_empty(self):
        job = make_job(JobStatus.QC_REQUIRED)
        record_decision(job, MANAGER, passed=True, notes=None, now=NOW)
        assert job.qc_notes == ""

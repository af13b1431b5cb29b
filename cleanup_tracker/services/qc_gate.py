# cleanup_tracker/services/qc_gate.py
"""
QC Gate — who may sign off a finished job, and what the sign-off records.

Only managers and salespeople may record a QC decision. The role check runs
before the job's status is looked at, so a detailer always gets Forbidden,
even on a job the state graph would let through.
"""

from cleanup_tracker.errors import Forbidden
from cleanup_tracker.models.enums import Role
from cleanup_tracker.utils.logger import get_audit_logger, get_logger

logger = get_logger(__name__)
audit = get_audit_logger()

QC_ROLES = frozenset({Role.MANAGER, Role.SALESPERSON})


def authorize_qc(actor):
    if actor.role not in QC_ROLES:
        logger.warning(f"[QC] user={actor.id} role={actor.role.value} denied QC decision")
        raise Forbidden("Only salespeople or managers can complete QC")


def record_decision(job, actor, passed: bool, notes, now):
    """Stamp the reviewer onto the job. Status changes belong to job_lifecycle."""
    job.qc_completed_by = actor.name
    job.qc_completed_by_id = actor.id
    job.qc_completed_at = now
    job.qc_notes = notes or ""
    job.qc_employee_number = actor.employee_number
    audit.info(f"[QC] job={job.id} {'passed' if passed else 'failed'} by user={actor.id}")

# cleanup_tracker/services/job_lifecycle.py
"""
Job Lifecycle State Machine.

    Pending → In Progress ⇄ Paused → {Completed | QC Required} → QC Approved
    QC Required → In Progress          (rework)
    any status except QC Approved / Cancelled → Cancelled

Every operation takes a Job, the acting identity and an optional `now`, and
mutates the job in place; persistence is job_service's concern. Two checks run
in a fixed order:
  1. authorization — may this role (and, for detailers, this person) do it?
  2. legality      — does the state graph allow it from the current status?
A failed check raises; nothing is ever a silent no-op.

Worked time is always
    elapsed(start, end, paused) = max(0, round_minutes(end - start) - paused)
Negative results from clock skew are clamped to zero.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from cleanup_tracker.errors import BadInput, Forbidden, IllegalTransition
from cleanup_tracker.models.enums import JobStatus, Role
from cleanup_tracker.models.job import Job, TechnicianSession
from cleanup_tracker.services import qc_gate
from cleanup_tracker.utils.logger import get_audit_logger, get_logger
from cleanup_tracker.utils.timeutils import round_minutes, utcnow

logger = get_logger(__name__)
audit = get_audit_logger()


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a lifecycle operation."""

    id: int
    role: Role
    name: Optional[str] = None
    employee_number: Optional[str] = None

    @classmethod
    def from_user(cls, user, role: Optional[Role] = None) -> "Actor":
        return cls(id=user.id, role=role or user.role, name=user.name,
                   employee_number=user.employee_number)


class Transition(str, enum.Enum):
    START = "start"
    PAUSE = "pause"
    ADD_TECHNICIAN = "add technician to"
    COMPLETE = "complete"
    QC_DECISION = "record QC for"
    CANCEL = "cancel"


# ── Legality ────────────────────────────────────────────────────────────────
LEGAL_SOURCES = {
    Transition.START: frozenset({JobStatus.PENDING, JobStatus.PAUSED, JobStatus.QC_REQUIRED}),
    Transition.PAUSE: frozenset({JobStatus.IN_PROGRESS}),
    Transition.ADD_TECHNICIAN: frozenset({JobStatus.IN_PROGRESS, JobStatus.PAUSED}),
    Transition.COMPLETE: frozenset({JobStatus.IN_PROGRESS, JobStatus.PAUSED}),
    Transition.QC_DECISION: frozenset({JobStatus.QC_REQUIRED, JobStatus.COMPLETED}),
    Transition.CANCEL: frozenset(JobStatus) - {JobStatus.QC_APPROVED, JobStatus.CANCELLED},
}

# ── Authorization ───────────────────────────────────────────────────────────
ANY = "any"
OWNER = "owner"     # detailer must be attached to the job (or the job is unclaimed)

ROLE_POLICY = {
    Transition.START: {Role.MANAGER: ANY, Role.DETAILER: OWNER},
    Transition.PAUSE: {Role.MANAGER: ANY, Role.DETAILER: OWNER},
    Transition.ADD_TECHNICIAN: {Role.MANAGER: ANY, Role.DETAILER: ANY},
    Transition.COMPLETE: {Role.MANAGER: ANY, Role.DETAILER: OWNER},
    Transition.QC_DECISION: {role: ANY for role in qc_gate.QC_ROLES},
    Transition.CANCEL: {Role.MANAGER: ANY},
}

TECHNICIAN_ROLES = frozenset({Role.DETAILER, Role.MANAGER})


def elapsed_minutes(start: Optional[datetime], end: Optional[datetime], paused_minutes: int = 0) -> int:
    if start is None or end is None:
        return 0
    return max(0, round_minutes(start, end) - (paused_minutes or 0))


def is_owner(job: Job, actor: Actor) -> bool:
    assigned = job.assigned_technician_ids or []
    if actor.id in assigned or job.technician_id == actor.id:
        return True
    return not assigned and job.technician_id is None


def authorize(job: Job, actor: Actor, transition: Transition):
    if transition is Transition.QC_DECISION:
        qc_gate.authorize_qc(actor)
    scope = ROLE_POLICY[transition].get(actor.role)
    if scope is None:
        logger.warning(f"[JOB {job.id}] role={actor.role.value} may not {transition.value} jobs")
        raise Forbidden(f"Role '{actor.role.value}' may not {transition.value} jobs")
    if scope == OWNER and not is_owner(job, actor):
        logger.warning(f"[JOB {job.id}] user={actor.id} is not assigned to this job")
        raise Forbidden(f"Only an assigned technician or a manager may {transition.value} this job")


def require_legal(job: Job, transition: Transition, requested: JobStatus):
    if job.status not in LEGAL_SOURCES[transition]:
        logger.warning(f"[JOB {job.id}] illegal {transition.name}: status={job.status.value}")
        raise IllegalTransition(job.status, requested, transition.value)


# ── Internal helpers ────────────────────────────────────────────────────────
def _fold_open_pause(job: Job, now: datetime):
    """Move the running pause (if any) into the pause total and clear pausedAt."""
    if job.paused_at is not None:
        job.pause_duration_minutes = (job.pause_duration_minutes or 0) + max(0, round_minutes(job.paused_at, now))
        job.paused_at = None
        job.pause_reason = None


def assign_technician(job: Job, technician_id: int):
    ids = list(job.assigned_technician_ids or [])
    if technician_id not in ids:
        # Reassign rather than append so the JSON column is flagged dirty
        job.assigned_technician_ids = ids + [technician_id]


def _open_session(job: Job, technician_id: int, technician_name: Optional[str], now: datetime):
    if any(s.technician_id == technician_id for s in job.active_technicians):
        return
    job.technician_sessions.append(TechnicianSession(
        technician_id=technician_id,
        technician_name=technician_name,
        session_start=now,
    ))


def _close_sessions(job: Job, now: datetime):
    for session in job.active_technicians:
        session.session_end = now
        session.duration_minutes = max(0, round_minutes(session.session_start, now))


def _finish(job: Job, actor: Actor, transition: Transition, previous: JobStatus, now: datetime):
    job.updated_at = now
    audit.info(
        f"[JOB {job.id}] {transition.name}: {previous.value} → {job.status.value} "
        f"by user={actor.id} ({actor.role.value})"
    )
    return job


# ── Transitions ─────────────────────────────────────────────────────────────
def start(job: Job, actor: Actor, now: Optional[datetime] = None) -> Job:
    """Begin, resume, or (from QC Required) reopen a job for rework."""
    now = now or utcnow()
    authorize(job, actor, Transition.START)
    require_legal(job, Transition.START, JobStatus.IN_PROGRESS)

    previous = job.status
    if previous == JobStatus.PAUSED:
        _fold_open_pause(job, now)
    elif previous == JobStatus.QC_REQUIRED:
        job.end_time = None
        job.completed_at = None
        job.duration_minutes = None
        job.qc_required = True

    job.status = JobStatus.IN_PROGRESS
    if job.start_time is None:
        job.start_time = now
    if previous != JobStatus.PENDING:
        job.resumed_at = now

    if actor.role == Role.DETAILER:
        if job.technician_id is None:
            job.technician_id = actor.id
            job.technician_name = actor.name
        assign_technician(job, actor.id)
        _open_session(job, actor.id, actor.name, now)

    return _finish(job, actor, Transition.START, previous, now)


def pause(job: Job, actor: Actor, reason: Optional[str] = None, now: Optional[datetime] = None) -> Job:
    now = now or utcnow()
    authorize(job, actor, Transition.PAUSE)
    require_legal(job, Transition.PAUSE, JobStatus.PAUSED)

    previous = job.status
    job.status = JobStatus.PAUSED
    job.paused_at = now
    job.pause_reason = reason or "Paused by user"
    job.resumed_at = None
    return _finish(job, actor, Transition.PAUSE, previous, now)


def add_technician(job: Job, actor: Actor, technician, now: Optional[datetime] = None) -> Job:
    """Attach another technician; a no-op for the roster if they are already on it."""
    now = now or utcnow()
    authorize(job, actor, Transition.ADD_TECHNICIAN)
    require_legal(job, Transition.ADD_TECHNICIAN, JobStatus.IN_PROGRESS)

    if not technician.is_active:
        raise Forbidden("Technician is inactive")
    if technician.role not in TECHNICIAN_ROLES:
        raise BadInput("Only detailers or managers can work on a job")

    assign_technician(job, technician.id)
    _open_session(job, technician.id, technician.name, now)
    return _finish(job, actor, Transition.ADD_TECHNICIAN, job.status, now)


def complete(job: Job, actor: Actor, now: Optional[datetime] = None) -> Job:
    now = now or utcnow()
    target = JobStatus.QC_REQUIRED if job.qc_required else JobStatus.COMPLETED
    authorize(job, actor, Transition.COMPLETE)
    require_legal(job, Transition.COMPLETE, target)

    previous = job.status
    _fold_open_pause(job, now)
    job.status = target
    if job.end_time is None:
        job.end_time = now
    job.completed_at = now
    job.duration_minutes = elapsed_minutes(job.start_time, job.end_time, job.pause_duration_minutes)
    _close_sessions(job, now)
    return _finish(job, actor, Transition.COMPLETE, previous, now)


def qc_decision(job: Job, actor: Actor, passed: bool, notes: Optional[str] = None,
                now: Optional[datetime] = None) -> Job:
    """
    passed  → QC Approved; the duration is recomputed from the original end time.
    !passed → QC Required with qcRequired set, ready for rework.
    Re-review of a Completed job is allowed.
    """
    now = now or utcnow()
    target = JobStatus.QC_APPROVED if passed else JobStatus.QC_REQUIRED
    authorize(job, actor, Transition.QC_DECISION)
    require_legal(job, Transition.QC_DECISION, target)

    previous = job.status
    if passed:
        job.status = JobStatus.QC_APPROVED
        job.qc_required = False
        if job.end_time is None:
            job.end_time = now
        if job.completed_at is None:
            job.completed_at = now
        job.duration_minutes = elapsed_minutes(job.start_time, job.end_time, job.pause_duration_minutes)
    else:
        job.status = JobStatus.QC_REQUIRED
        job.qc_required = True

    qc_gate.record_decision(job, actor, passed, notes, now)
    return _finish(job, actor, Transition.QC_DECISION, previous, now)


def cancel(job: Job, actor: Actor, now: Optional[datetime] = None) -> Job:
    now = now or utcnow()
    authorize(job, actor, Transition.CANCEL)
    require_legal(job, Transition.CANCEL, JobStatus.CANCELLED)

    previous = job.status
    _fold_open_pause(job, now)
    job.status = JobStatus.CANCELLED
    job.qc_required = False
    job.end_time = now
    if job.completed_at is None:
        job.completed_at = now
    _close_sessions(job, now)
    return _finish(job, actor, Transition.CANCEL, previous, now)

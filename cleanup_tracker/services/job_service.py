# cleanup_tracker/services/job_service.py
"""
Persistence around the lifecycle state machine.

Each call is one load → mutate → commit against a single job row. The row's
`revision` column is SQLAlchemy's version counter, so if another request
committed first the UPDATE matches nothing, StaleDataError is raised, and the
caller gets Conflict instead of a lost update. Clients may also pass the
revision they last saw to fail fast on a stale screen.
"""

from typing import Callable, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from cleanup_tracker.errors import BadInput, Conflict, NotFound, TrackerError
from cleanup_tracker.models.enums import JobStatus
from cleanup_tracker.models.job import Job
from cleanup_tracker.models.user import User
from cleanup_tracker.schemas.job import JobCreate
from cleanup_tracker.services import job_lifecycle
from cleanup_tracker.services.job_lifecycle import Actor
from cleanup_tracker.services.service_catalog import expected_minutes
from cleanup_tracker.utils.logger import get_logger
from cleanup_tracker.utils.timeutils import utcnow

logger = get_logger(__name__)


def get_job(db: Session, job_id: int) -> Job:
    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    return job


def _get_technician(db: Session, technician_id: int) -> User:
    technician = db.get(User, technician_id)
    if technician is None:
        raise NotFound("Technician not found")
    return technician


def _commit(db: Session, job: Job) -> Job:
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"[JOB {job.id}] concurrent update detected — write rejected")
        raise Conflict("Job was modified by another request; reload and retry")
    db.refresh(job)
    return job


def apply_transition(db: Session, job_id: int, actor: Actor, operation: Callable,
                     expected_revision: Optional[int] = None, **kwargs) -> Job:
    job = get_job(db, job_id)
    if expected_revision is not None and job.revision != expected_revision:
        raise Conflict("Job was modified by another request; reload and retry",
                       currentRevision=job.revision)
    try:
        operation(job, actor, **kwargs)
    except TrackerError:
        db.rollback()
        raise
    return _commit(db, job)


# ── Lifecycle operations ────────────────────────────────────────────────────
def start_job(db: Session, job_id: int, actor: Actor, expected_revision: Optional[int] = None) -> Job:
    return apply_transition(db, job_id, actor, job_lifecycle.start, expected_revision)


def pause_job(db: Session, job_id: int, actor: Actor, reason: Optional[str] = None,
              expected_revision: Optional[int] = None) -> Job:
    return apply_transition(db, job_id, actor, job_lifecycle.pause, expected_revision, reason=reason)


def add_technician(db: Session, job_id: int, actor: Actor, technician_id: int,
                   expected_revision: Optional[int] = None) -> Job:
    technician = _get_technician(db, technician_id)
    return apply_transition(db, job_id, actor, job_lifecycle.add_technician, expected_revision,
                            technician=technician)


def complete_job(db: Session, job_id: int, actor: Actor, expected_revision: Optional[int] = None) -> Job:
    return apply_transition(db, job_id, actor, job_lifecycle.complete, expected_revision)


def record_qc(db: Session, job_id: int, actor: Actor, passed: bool, notes: Optional[str] = None,
              expected_revision: Optional[int] = None) -> Job:
    return apply_transition(db, job_id, actor, job_lifecycle.qc_decision, expected_revision,
                            passed=passed, notes=notes)


def cancel_job(db: Session, job_id: int, actor: Actor, expected_revision: Optional[int] = None) -> Job:
    return apply_transition(db, job_id, actor, job_lifecycle.cancel, expected_revision)


# ── Creation ────────────────────────────────────────────────────────────────
def create_job(db: Session, actor: Actor, body: JobCreate) -> Job:
    """Queue a job as Pending, or open it straight into In Progress."""
    now = utcnow()
    job = Job(
        vin=body.vin.strip().upper() if body.vin else None,
        stock_number=body.stock_number,
        vehicle_description=body.vehicle_description,
        service_type=body.service_type,
        priority=body.priority,
        sales_person=body.sales_person,
        qc_required=body.qc_required,
        expected_duration_minutes=expected_minutes(body.service_type),
        created_at=now,
        updated_at=now,
    )

    for technician_id in body.technician_ids:
        technician = _get_technician(db, technician_id)
        if not technician.is_active or technician.role not in job_lifecycle.TECHNICIAN_ROLES:
            raise BadInput(f"User {technician_id} cannot be assigned as a technician")
        if job.technician_id is None:
            job.technician_id = technician.id
            job.technician_name = technician.name
        job_lifecycle.assign_technician(job, technician.id)

    db.add(job)
    db.flush()
    if body.start_immediately:
        try:
            job_lifecycle.start(job, actor, now=now)
        except TrackerError:
            db.rollback()
            raise
    db.commit()
    db.refresh(job)
    logger.info(f"[JOB {job.id}] created vin={job.vin} status={job.status.value} by user={actor.id}")
    return job


def join_by_vin(db: Session, actor: Actor, vin: str) -> Job:
    """Attach the caller to the newest In Progress job for this VIN, or open one."""
    vin = (vin or "").strip().upper()
    if not vin:
        raise BadInput("vin required")

    job = (
        db.query(Job)
        .filter(Job.vin == vin, Job.status == JobStatus.IN_PROGRESS)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .first()
    )
    if job is None:
        return create_job(db, actor, JobCreate(vin=vin, vehicle_description="Vehicle",
                                               start_immediately=True))

    me = _get_technician(db, actor.id)
    return apply_transition(db, job.id, actor, job_lifecycle.add_technician, technician=me)

# cleanup_tracker/routers/jobs.py
"""
Job creation and lifecycle transitions. Every route needs a bearer token;
status codes come from the domain errors (403 role, 409 illegal transition or
stale revision, 404 unknown job).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cleanup_tracker.database import get_db
from cleanup_tracker.schemas.job import (
    AddTechnicianRequest, JobCreate, JobOut, JoinByVinRequest, PauseRequest,
    QcDecisionRequest, TransitionRequest,
)
from cleanup_tracker.services import job_service
from cleanup_tracker.services.job_lifecycle import Actor
from cleanup_tracker.services.service_catalog import SERVICE_EXPECTATIONS
from cleanup_tracker.utils.auth import get_current_actor

router = APIRouter()


@router.get("/service-expectations", summary="Expected minutes per service type")
def service_expectations():
    return SERVICE_EXPECTATIONS


@router.post("/jobs", response_model=JobOut, status_code=status.HTTP_201_CREATED, summary="Create a job")
def create_job(body: JobCreate, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.create_job(db, actor, body)


@router.get("/jobs/{job_id}", response_model=JobOut, summary="Get one job")
def get_job(job_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.get_job(db, job_id)


@router.post("/jobs/{job_id}/start", response_model=JobOut, summary="Start, resume or rework a job")
def start_job(job_id: int, body: TransitionRequest = TransitionRequest(),
              actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.start_job(db, job_id, actor, expected_revision=body.revision)


@router.post("/jobs/{job_id}/pause", response_model=JobOut, summary="Pause a running job")
def pause_job(job_id: int, body: PauseRequest = PauseRequest(),
              actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.pause_job(db, job_id, actor, reason=body.reason, expected_revision=body.revision)


@router.post("/jobs/{job_id}/add-technician", response_model=JobOut, summary="Add a technician to a job")
def add_technician(job_id: int, body: AddTechnicianRequest,
                   actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.add_technician(db, job_id, actor, body.technician_id, expected_revision=body.revision)


@router.post("/jobs/{job_id}/complete", response_model=JobOut, summary="Finish a job (→ Completed or QC Required)")
def complete_job(job_id: int, body: TransitionRequest = TransitionRequest(),
                 actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.complete_job(db, job_id, actor, expected_revision=body.revision)


@router.post("/jobs/{job_id}/qc", response_model=JobOut, summary="Record a QC decision (manager/salesperson)")
def qc_decision(job_id: int, body: QcDecisionRequest,
                actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.record_qc(db, job_id, actor, passed=body.passed, notes=body.notes,
                                 expected_revision=body.revision)


@router.post("/jobs/{job_id}/cancel", response_model=JobOut, summary="Cancel a job (manager)")
def cancel_job(job_id: int, body: TransitionRequest = TransitionRequest(),
               actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.cancel_job(db, job_id, actor, expected_revision=body.revision)


@router.put("/vehicles/join-by-vin", response_model=JobOut, summary="Join (or open) the active job for a VIN")
def join_by_vin(body: JoinByVinRequest, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return job_service.join_by_vin(db, actor, body.vin)

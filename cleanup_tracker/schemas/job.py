# cleanup_tracker/schemas/job.py
from datetime import datetime
from typing import Optional

from cleanup_tracker.models.enums import JobStatus, Priority
from cleanup_tracker.schemas.base import CamelModel


class JobCreate(CamelModel):
    vin: Optional[str] = None
    stock_number: Optional[str] = None
    vehicle_description: Optional[str] = None
    service_type: str = "Cleanup"
    priority: Priority = Priority.NORMAL
    sales_person: Optional[str] = None
    qc_required: bool = False
    technician_ids: list[int] = []
    start_immediately: bool = False


class TransitionRequest(CamelModel):
    revision: Optional[int] = None      # optional optimistic-concurrency check


class PauseRequest(TransitionRequest):
    reason: Optional[str] = None


class AddTechnicianRequest(TransitionRequest):
    technician_id: int


class QcDecisionRequest(TransitionRequest):
    passed: bool = True
    notes: Optional[str] = None


class JoinByVinRequest(CamelModel):
    vin: str


class TechnicianSessionOut(CamelModel):
    technician_id: int
    technician_name: Optional[str]
    session_start: datetime
    session_end: Optional[datetime]
    duration_minutes: Optional[int]


class JobOut(CamelModel):
    id: int
    status: JobStatus
    vin: Optional[str]
    stock_number: Optional[str]
    vehicle_description: Optional[str]
    service_type: str
    priority: Priority
    sales_person: Optional[str]
    expected_duration_minutes: Optional[int]

    technician_id: Optional[int]
    technician_name: Optional[str]
    assigned_technician_ids: list[int]
    active_technicians: list[TechnicianSessionOut]
    technician_sessions: list[TechnicianSessionOut]

    start_time: Optional[datetime]
    paused_at: Optional[datetime]
    pause_reason: Optional[str]
    resumed_at: Optional[datetime]
    pause_duration_minutes: int
    end_time: Optional[datetime]
    completed_at: Optional[datetime]
    duration_minutes: Optional[int]

    qc_required: bool
    qc_completed_by: Optional[str]
    qc_completed_by_id: Optional[int]
    qc_completed_at: Optional[datetime]
    qc_notes: Optional[str]
    qc_employee_number: Optional[str]

    revision: int
    created_at: datetime
    updated_at: Optional[datetime]

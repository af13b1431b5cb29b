# cleanup_tracker/models/job.py
"""
Reconditioning jobs and the technician sessions attached to them.

Status and every timing column are written only by services/job_lifecycle.py.
`revision` is SQLAlchemy's version counter: each UPDATE is issued as
`... WHERE revision = <loaded value>`, so a concurrent writer loses with
StaleDataError instead of silently overwriting pause accounting.
"""

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import relationship
from cleanup_tracker.database import Base
from cleanup_tracker.models.enums import JobStatus, Priority, enum_values


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    status = Column(Enum(JobStatus, native_enum=False, length=20, values_callable=enum_values),
                    nullable=False, index=True)

    # Vehicle / work description
    vin = Column(String(32), index=True)
    stock_number = Column(String(50), index=True)
    vehicle_description = Column(String(255))
    service_type = Column(String(50), nullable=False, index=True)
    priority = Column(Enum(Priority, native_enum=False, length=10, values_callable=enum_values),
                      nullable=False)
    sales_person = Column(String(200))
    expected_duration_minutes = Column(Integer)

    # Technicians
    technician_id = Column(Integer, index=True)       # detailer who opened the job
    technician_name = Column(String(200))
    assigned_technician_ids = Column(JSON, nullable=False)
    technician_sessions = relationship(
        "TechnicianSession",
        back_populates="job",
        order_by="TechnicianSession.id",
        cascade="all, delete-orphan",
    )

    # Timing
    start_time = Column(DateTime, index=True)
    paused_at = Column(DateTime)
    pause_reason = Column(String(255))
    resumed_at = Column(DateTime)
    pause_duration_minutes = Column(Integer, nullable=False)
    end_time = Column(DateTime)
    completed_at = Column(DateTime)
    duration_minutes = Column(Integer)

    # Quality control
    qc_required = Column(Boolean, nullable=False, index=True)
    qc_completed_by = Column(String(200))
    qc_completed_by_id = Column(Integer, ForeignKey("users.id"))
    qc_completed_at = Column(DateTime)
    qc_notes = Column(Text)
    qc_employee_number = Column(String(50))

    revision = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime)

    __mapper_args__ = {"version_id_col": revision}

    def __init__(self, **kwargs):
        # Column defaults only apply at flush; the state machine also works on unsaved jobs.
        kwargs.setdefault("status", JobStatus.PENDING)
        kwargs.setdefault("service_type", "Cleanup")
        kwargs.setdefault("priority", Priority.NORMAL)
        kwargs.setdefault("assigned_technician_ids", [])
        kwargs.setdefault("pause_duration_minutes", 0)
        kwargs.setdefault("qc_required", False)
        super().__init__(**kwargs)

    @property
    def active_technicians(self) -> list:
        """Open sessions, in the order they were opened."""
        return [s for s in self.technician_sessions if s.session_end is None]

    def __repr__(self):
        return f"<Job {self.id} vin={self.vin} status={self.status.value if self.status else None}>"


class TechnicianSession(Base):
    __tablename__ = "job_technician_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    technician_id = Column(Integer, nullable=False, index=True)
    technician_name = Column(String(200))
    session_start = Column(DateTime, nullable=False)
    session_end = Column(DateTime)
    duration_minutes = Column(Integer)

    job = relationship("Job", back_populates="technician_sessions")

    def __repr__(self):
        return f"<TechnicianSession job={self.job_id} tech={self.technician_id} open={self.session_end is None}>"

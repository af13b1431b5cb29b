# cleanup_tracker/models/enums.py
"""
Closed value sets shared by the ORM, the schemas and the state machine.
Stored as their string values so the database stays readable.
"""

import enum


class Role(str, enum.Enum):
    MANAGER = "manager"
    DETAILER = "detailer"
    SALESPERSON = "salesperson"


class JobStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    QC_REQUIRED = "QC Required"
    QC_APPROVED = "QC Approved"
    CANCELLED = "Cancelled"


class Priority(str, enum.Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"
    URGENT = "Urgent"


def enum_values(enum_cls):
    """values_callable for sqlalchemy.Enum — persist .value instead of .name."""
    return [member.value for member in enum_cls]

# cleanup_tracker/services/user_service.py
"""
Roster administration: create, update, deactivate, change PIN, seed.
Only managers administer users; anyone may change their own PIN.
"""

import time
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cleanup_tracker.config import settings
from cleanup_tracker.errors import BadInput, Conflict, Forbidden, NotFound
from cleanup_tracker.models.enums import Role
from cleanup_tracker.models.user import User
from cleanup_tracker.schemas.user import UserCreate, UserUpdate
from cleanup_tracker.services import credential_store
from cleanup_tracker.services.job_lifecycle import Actor
from cleanup_tracker.utils.logger import get_audit_logger, get_logger
from cleanup_tracker.utils.timeutils import utcnow

logger = get_logger(__name__)
audit = get_audit_logger()

DEFAULT_ROSTER = [
    {"username": "manager", "name": "Joe Gallant", "role": Role.MANAGER, "pin": "1701",
     "employee_number": "MGR001", "phone_number": "555-0001"},
    {"name": "Alfred", "role": Role.DETAILER, "pin": "1716", "uid": "detailer-001",
     "employee_number": "DET001", "phone_number": "555-0002"},
    {"name": "Brian", "role": Role.DETAILER, "pin": "1709", "uid": "detailer-002",
     "employee_number": "DET002", "phone_number": "555-0003"},
    {"name": "Sarah Johnson", "role": Role.SALESPERSON, "pin": "2001",
     "employee_number": "SALES001", "phone_number": "555-0101"},
    {"name": "Mike Chen", "role": Role.SALESPERSON, "pin": "2002",
     "employee_number": "SALES002", "phone_number": "555-0102"},
    {"name": "Lisa Rodriguez", "role": Role.SALESPERSON, "pin": "2003",
     "employee_number": "SALES003", "phone_number": "555-0103"},
]


def _require_manager(actor: Actor):
    if actor.role != Role.MANAGER:
        raise Forbidden("Manager role required")


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def list_users(db: Session, actor: Actor) -> list:
    _require_manager(actor)
    return db.query(User).order_by(User.name).all()


def _commit(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Username, uid or employee number already in use")


def create_user(db: Session, actor: Optional[Actor], body: UserCreate) -> User:
    """actor=None is reserved for seeding and scripts."""
    if actor is not None:
        _require_manager(actor)
    name = body.name.strip()
    if not name:
        raise BadInput("name and pin are required")

    now = utcnow()
    user = User(
        name=name,
        role=body.role,
        username=body.username.strip().lower() if body.username else None,
        uid=body.uid or (f"detailer-{int(time.time() * 1000)}" if body.role == Role.DETAILER else None),
        employee_number=body.employee_number.strip().upper() if body.employee_number else None,
        phone_number=body.phone_number,
        department=body.department,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    credential_store.set_pin(db, user, body.pin, commit=False)
    db.add(user)
    _commit(db)
    db.refresh(user)
    audit.info(f"User created: id={user.id} role={user.role.value}")
    return user


def update_user(db: Session, actor: Actor, user_id: int, body: UserUpdate) -> User:
    _require_manager(actor)
    user = get_user(db, user_id)

    if body.pin:
        credential_store.set_pin(db, user, body.pin, commit=False)
    if body.name is not None:
        user.name = body.name.strip()
    if body.employee_number is not None:
        user.employee_number = body.employee_number.strip().upper() or None
    if body.phone_number is not None:
        user.phone_number = body.phone_number
    if body.department is not None:
        user.department = body.department
    if body.role is not None:
        user.role = body.role
    if body.is_active is not None:
        if not body.is_active and user.id == actor.id:
            raise BadInput("Managers cannot deactivate themselves")
        user.is_active = body.is_active

    user.updated_at = utcnow()
    _commit(db)
    db.refresh(user)
    audit.info(f"User updated: id={user.id} by manager={actor.id}")
    return user


def change_pin(db: Session, actor: Actor, user_id: int, pin: str) -> User:
    if actor.id != user_id:
        _require_manager(actor)
    user = get_user(db, user_id)
    return credential_store.set_pin(db, user, pin)


def deactivate_user(db: Session, actor: Actor, user_id: int) -> User:
    """Soft delete — the row stays so historic jobs keep their technician."""
    return update_user(db, actor, user_id, UserUpdate(is_active=False))


def seed_default_users(db: Session):
    """Populate an empty roster. Returns (seeded, user_count)."""
    if settings.is_production and not settings.ALLOW_SEED:
        raise Forbidden("Seeding disabled in production")
    count = db.query(User).count()
    if count > 0:
        return False, count
    for entry in DEFAULT_ROSTER:
        create_user(db, None, UserCreate(**entry))
    count = db.query(User).count()
    logger.info(f"Seeded default roster: {count} users")
    return True, count

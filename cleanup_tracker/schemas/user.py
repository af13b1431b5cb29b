# cleanup_tracker/schemas/user.py
from datetime import datetime
from typing import Optional

from cleanup_tracker.models.enums import Role
from cleanup_tracker.schemas.base import CamelModel


class UserCreate(CamelModel):
    name: str
    pin: str
    role: Role = Role.DETAILER
    username: Optional[str] = None
    uid: Optional[str] = None
    employee_number: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None


class UserUpdate(CamelModel):
    name: Optional[str] = None
    pin: Optional[str] = None
    role: Optional[Role] = None
    employee_number: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


class PinChange(CamelModel):
    pin: str


class UserOut(CamelModel):
    id: int
    name: str
    display_name: str
    role: Role
    username: Optional[str]
    uid: Optional[str]
    employee_number: Optional[str]
    phone_number: Optional[str]
    department: Optional[str]
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime

# cleanup_tracker/models/user.py
"""
Staff roster table — managers, detailers and salespeople.
Holds the bcrypt PIN hash and role used by credential_store and token_service.
Rows are deactivated, never deleted.
"""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from cleanup_tracker.database import Base
from cleanup_tracker.models.enums import Role, enum_values


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    username = Column(String(100), unique=True, index=True)        # stored lower-case
    uid = Column(String(100), unique=True, index=True)             # external id
    employee_number = Column(String(50), unique=True, index=True)  # stored upper-case
    phone_number = Column(String(50))
    department = Column(String(100))
    role = Column(Enum(Role, native_enum=False, length=20, values_callable=enum_values),
                  nullable=False, index=True)
    pin_hash = Column(String(100))
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime)

    @property
    def display_name(self) -> str:
        handle = self.employee_number or self.username
        return f"{self.name} ({handle})" if handle else self.name

    def __repr__(self):
        return f"<User {self.id} name={self.name} role={self.role.value if self.role else None}>"

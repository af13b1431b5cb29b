# cleanup_tracker/services/credential_store.py
"""
Credential Store — PIN hashing, PIN/identifier resolution and PIN uniqueness.

PINs are 4–8 digit strings stored only as bcrypt hashes. Because every hash
carries its own salt, a PIN cannot be looked up by index: login-by-PIN and the
uniqueness check both verify the candidate against every active user's hash.
That linear scan is fine for a dealership roster (tens to low hundreds of
users) but is the scalability ceiling of this scheme; a larger roster needs a
keyed, non-salted PIN fingerprint column that can be indexed.
"""

import re
from typing import Optional

import bcrypt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from cleanup_tracker.config import settings
from cleanup_tracker.errors import BadInput, Conflict, Forbidden, InvalidCredentials, NotFound
from cleanup_tracker.models.user import User
from cleanup_tracker.utils.logger import get_audit_logger, get_logger
from cleanup_tracker.utils.timeutils import utcnow

logger = get_logger(__name__)
audit = get_audit_logger()

PIN_PATTERN = re.compile(r"^[0-9]{4,8}$")


# ── Hashing ─────────────────────────────────────────────────────────────────
def validate_pin(pin) -> str:
    """Return the PIN if it is 4–8 digits, else raise BadInput."""
    if not isinstance(pin, str) or not PIN_PATTERN.match(pin):
        raise BadInput("PIN must be 4-8 digits")
    return pin


def hash_pin(pin: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.PIN_HASH_ROUNDS)
    return bcrypt.hashpw(pin.encode("utf-8"), salt).decode("utf-8")


def verify_pin(pin: str, pin_hash: Optional[str]) -> bool:
    if not pin or not pin_hash:
        return False
    try:
        return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Malformed PIN hash encountered during verification")
        return False


# ── Lookups ─────────────────────────────────────────────────────────────────
def _pin_holders(db: Session, exclude_id: Optional[int] = None, active_only: bool = True):
    q = db.query(User).filter(User.pin_hash != None)  # noqa: E711
    if active_only:
        q = q.filter(User.is_active == True)  # noqa: E712
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return q.order_by(User.id).all()


def _find_by_pin(db: Session, pin: str) -> Optional[User]:
    for candidate in _pin_holders(db):
        if verify_pin(pin, candidate.pin_hash):
            return candidate
    return None


def find_by_identifier(db: Session, identifier: str) -> Optional[User]:
    """Employee number (upper-cased), username (lower-cased) or external uid."""
    if not identifier:
        return None
    identifier = identifier.strip()
    return db.query(User).filter(or_(
        User.employee_number == identifier.upper(),
        User.username == identifier.lower(),
        User.uid == identifier,
    )).first()


def _touch_login(db: Session, user: User) -> User:
    user.last_login = utcnow()
    db.commit()
    return user


def resolve_by_pin(db: Session, pin: str) -> User:
    """PIN-only lookup over active users. InvalidCredentials when nobody matches."""
    validate_pin(pin)
    user = _find_by_pin(db, pin)
    if user is None:
        raise InvalidCredentials()
    return _touch_login(db, user)


def resolve_by_identifier(db: Session, identifier: str, pin: Optional[str] = None) -> User:
    """
    Lookup by employee number, username or uid. When `pin` is given it must
    verify against that user's hash. Inactive users are refused with Forbidden,
    and only after the PIN check so a wrong PIN reveals nothing.
    """
    user = find_by_identifier(db, identifier)
    if user is None:
        raise NotFound("User not found")
    if pin is not None and not verify_pin(pin, user.pin_hash):
        raise InvalidCredentials()
    if not user.is_active:
        logger.warning(f"Inactive user {user.id} attempted to log in")
        raise Forbidden("User is inactive")
    return _touch_login(db, user)


def authenticate(db: Session, pin: Optional[str], identifier: Optional[str] = None) -> User:
    """
    Login rule:
    - identifier given and different from the PIN → resolve the identifier,
      then verify the PIN against that user's hash;
    - otherwise → PIN-only login (the identifier field may carry the PIN).
    """
    identifier = (identifier or "").strip()
    submitted = (pin or "").strip() or identifier
    if not submitted:
        raise BadInput("PIN required")
    validate_pin(submitted)

    try:
        if pin and identifier and identifier != submitted:
            user = resolve_by_identifier(db, identifier, pin=submitted)
        else:
            user = resolve_by_pin(db, submitted)
    except (NotFound, InvalidCredentials):
        logger.warning(f"Failed login for identifier '{identifier}'" if identifier else "Failed PIN-only login")
        raise InvalidCredentials()

    audit.info(f"Login: user={user.id} role={user.role.value}")
    return user


# ── Writes ──────────────────────────────────────────────────────────────────
def is_pin_in_use(db: Session, pin: str, exclude_id: Optional[int] = None) -> bool:
    # Deactivated users count too, so reactivating one can never duplicate an active PIN
    return any(verify_pin(pin, u.pin_hash) for u in _pin_holders(db, exclude_id, active_only=False))


def set_pin(db: Session, user: User, new_pin: str, commit: bool = True) -> User:
    """Store a new PIN hash. Conflict if another user already verifies against it."""
    validate_pin(new_pin)
    if is_pin_in_use(db, new_pin, exclude_id=user.id):
        raise Conflict("PIN already in use")
    user.pin_hash = hash_pin(new_pin)
    user.updated_at = utcnow()
    if commit:
        db.commit()
        audit.info(f"PIN changed for user {user.id}")
    return user

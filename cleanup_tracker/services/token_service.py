# cleanup_tracker/services/token_service.py
"""
Token Issuer — JWT generation, verification and refresh.

Access token:  15 minutes (JWT_ACCESS_EXPIRES_MINUTES), payload {sub, role}
Refresh token: 7 days     (JWT_REFRESH_EXPIRES_DAYS),  payload {sub}
Algorithm:     HS256

Access and refresh tokens are signed with different secrets, so a leaked
secret of one class cannot be used to forge the other. Refresh re-reads the
user row: a role change or deactivation applies on the next refresh.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.orm import Session

from cleanup_tracker.config import settings
from cleanup_tracker.errors import TokenExpired, TokenInvalid
from cleanup_tracker.models.enums import Role
from cleanup_tracker.models.user import User
from cleanup_tracker.utils.logger import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenIdentity:
    subject: int
    role: Role


def access_ttl() -> timedelta:
    return timedelta(minutes=settings.JWT_ACCESS_EXPIRES_MINUTES)


def refresh_ttl() -> timedelta:
    return timedelta(days=settings.JWT_REFRESH_EXPIRES_DAYS)


# ═══════════════════════════════════════════════════════════════
# Token Generation
# ═══════════════════════════════════════════════════════════════
def issue_access_token(user: User, now: datetime = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "role": user.role.value,
        "type": "access",
        "iat": now,
        "exp": now + access_ttl(),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.access_secret, algorithm=ALGORITHM)


def issue_refresh_token(user: User, now: datetime = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "type": "refresh",
        "iat": now,
        "exp": now + refresh_ttl(),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.refresh_secret, algorithm=ALGORITHM)


def issue_token_pair(user: User) -> dict:
    return {
        "access_token": issue_access_token(user),
        "refresh_token": issue_refresh_token(user),
        "access_ttl": int(access_ttl().total_seconds()),
        "refresh_ttl": int(refresh_ttl().total_seconds()),
        "token_type": "Bearer",
    }


# ═══════════════════════════════════════════════════════════════
# Token Verification
# ═══════════════════════════════════════════════════════════════
def _decode(token: str, secret: str, expected_type: str) -> dict:
    if not token:
        raise TokenInvalid("Access token required" if expected_type == "access" else "Invalid refresh token")
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise TokenExpired(f"{expected_type.capitalize()} token expired")
    except jwt.InvalidTokenError:
        raise TokenInvalid(f"Invalid {expected_type} token")

    if payload.get("type") != expected_type:
        raise TokenInvalid(f"Expected {expected_type} token, got {payload.get('type')}")
    return payload


def verify_access(token: str) -> TokenIdentity:
    """Signature + expiry check only — CPU bound, no database access."""
    payload = _decode(token, settings.access_secret, "access")
    try:
        return TokenIdentity(subject=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, ValueError):
        raise TokenInvalid("Malformed access token")


def refresh(db: Session, refresh_token: str) -> tuple:
    """Verify a refresh token and mint a new pair from the live user record."""
    try:
        payload = _decode(refresh_token, settings.refresh_secret, "refresh")
    except TokenExpired:
        raise TokenInvalid("Invalid refresh token")

    try:
        user_id = int(payload["sub"])
    except (KeyError, ValueError):
        raise TokenInvalid("Invalid refresh token")

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        logger.warning(f"Refresh rejected for missing/inactive user {user_id}")
        raise TokenInvalid("Invalid refresh token")

    return user, issue_token_pair(user)

# cleanup_tracker/utils/auth.py
"""
FastAPI dependencies that turn `Authorization: Bearer <token>` into an Actor.
The token supplies the role; the user row is re-read so a deactivated user is
locked out immediately, even with an unexpired token.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cleanup_tracker.database import get_db
from cleanup_tracker.errors import Forbidden, TokenInvalid
from cleanup_tracker.models.user import User
from cleanup_tracker.services import token_service
from cleanup_tracker.services.job_lifecycle import Actor

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> token_service.TokenIdentity:
    if credentials is None or not credentials.credentials:
        raise TokenInvalid("Access token required")
    return token_service.verify_access(credentials.credentials)


def get_current_actor(
    identity: token_service.TokenIdentity = Depends(get_token_identity),
    db: Session = Depends(get_db),
) -> Actor:
    user = db.get(User, identity.subject)
    if user is None:
        raise TokenInvalid("Unknown user")
    if not user.is_active:
        raise Forbidden("User is inactive")
    return Actor.from_user(user, role=identity.role)

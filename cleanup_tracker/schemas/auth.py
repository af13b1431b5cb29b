# cleanup_tracker/schemas/auth.py
from typing import Optional

from cleanup_tracker.schemas.base import CamelModel
from cleanup_tracker.schemas.user import UserOut


class LoginRequest(CamelModel):
    identifier: Optional[str] = None    # employee number, username or uid
    pin: Optional[str] = None


class RefreshRequest(CamelModel):
    refresh_token: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    access_ttl: int                     # seconds
    refresh_ttl: int                    # seconds
    token_type: str = "Bearer"


class LoginResponse(TokenPair):
    identity: UserOut

# cleanup_tracker/routers/auth.py
"""PIN login, token refresh and the current-user lookup."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cleanup_tracker.database import get_db
from cleanup_tracker.schemas.auth import LoginRequest, LoginResponse, RefreshRequest, TokenPair
from cleanup_tracker.schemas.user import UserOut
from cleanup_tracker.services import credential_store, token_service, user_service
from cleanup_tracker.services.job_lifecycle import Actor
from cleanup_tracker.utils.auth import get_current_actor

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse, summary="Log in with a PIN (and optional identifier)")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = credential_store.authenticate(db, pin=body.pin, identifier=body.identifier)
    tokens = token_service.issue_token_pair(user)
    return LoginResponse(identity=UserOut.model_validate(user), **tokens)


@router.post("/auth/refresh", response_model=TokenPair, summary="Exchange a refresh token for a new pair")
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    _, tokens = token_service.refresh(db, body.refresh_token)
    return tokens


@router.get("/auth/me", response_model=UserOut, summary="The authenticated user")
def me(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_service.get_user(db, actor.id)

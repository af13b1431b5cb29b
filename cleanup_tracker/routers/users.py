# cleanup_tracker/routers/users.py
"""Roster administration — manager only, except changing your own PIN."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cleanup_tracker.database import get_db
from cleanup_tracker.schemas.user import PinChange, UserCreate, UserOut, UserUpdate
from cleanup_tracker.services import user_service
from cleanup_tracker.services.job_lifecycle import Actor
from cleanup_tracker.utils.auth import get_current_actor

router = APIRouter()


@router.get("/users", response_model=list[UserOut], summary="List the roster")
def list_users(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_service.list_users(db, actor)


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED, summary="Add a user")
def create_user(body: UserCreate, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_service.create_user(db, actor, body)


@router.put("/users/{user_id}", response_model=UserOut, summary="Update a user")
def update_user(user_id: int, body: UserUpdate,
                actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_service.update_user(db, actor, user_id, body)


@router.put("/users/{user_id}/pin", response_model=UserOut, summary="Change a PIN")
def change_pin(user_id: int, body: PinChange,
               actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_service.change_pin(db, actor, user_id, body.pin)


@router.delete("/users/{user_id}", response_model=UserOut, summary="Deactivate a user")
def deactivate_user(user_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_service.deactivate_user(db, actor, user_id)

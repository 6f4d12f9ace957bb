"""User profile routes for the Contacts API."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import get_current_user, get_password_hash
from .database import get_db
from .models import User
from . import schemas, crud

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/current", response_model=schemas.WebResponse[schemas.UserOut])
def read_current(current_user: User = Depends(get_current_user)):
    """
    Retrieve details of the currently authenticated user.

    Args:
        current_user (User): Authenticated user obtained from the session token.

    Returns:
        dict: Envelope with the user profile.
    """
    return {"data": current_user}


@router.patch("/current", response_model=schemas.WebResponse[schemas.UserOut])
def update_current(
    changes: schemas.UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update the name and/or password of the authenticated user.

    Only fields provided in the request are changed.

    Args:
        changes (UserUpdate): Fields to update.
        current_user (User): Authenticated user.
        db (Session): Database session.

    Returns:
        dict: Envelope with the updated user profile.
    """
    hashed_password = (
        get_password_hash(changes.password) if changes.password is not None else None
    )
    user = crud.update_user(db, current_user, changes.name, hashed_password)
    return {"data": user}

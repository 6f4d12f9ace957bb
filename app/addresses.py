"""Address routes nested under a contact."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import schemas, crud
from .auth import get_current_user
from .database import get_db
from .models import User

router = APIRouter(prefix="/api/contacts/{contact_id}/addresses", tags=["addresses"])


@router.post("", response_model=schemas.WebResponse[schemas.AddressOut])
def create_address(
    contact_id: schemas.ContactId,
    address_in: schemas.AddressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add an address to a contact of the current user."""
    return {"data": crud.create_address(db, contact_id, address_in, current_user)}


@router.get("", response_model=schemas.WebResponse[List[schemas.AddressOut]])
def list_addresses(
    contact_id: schemas.ContactId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List every address of a contact of the current user."""
    return {"data": crud.list_addresses(db, contact_id, current_user)}


@router.get("/{address_id}", response_model=schemas.WebResponse[schemas.AddressOut])
def get_address(
    contact_id: schemas.ContactId,
    address_id: schemas.AddressId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"data": crud.get_address(db, contact_id, address_id, current_user)}


@router.put("/{address_id}", response_model=schemas.WebResponse[schemas.AddressOut])
def update_address(
    contact_id: schemas.ContactId,
    address_id: schemas.AddressId,
    address_in: schemas.AddressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Replace the fields of an address.

    Raises:
        NotFoundError: If the contact or the address is not found.
    """
    return {
        "data": crud.update_address(
            db, contact_id, address_id, address_in, current_user
        )
    }


@router.delete("/{address_id}", response_model=schemas.WebResponse[str])
def remove_address(
    contact_id: schemas.ContactId,
    address_id: schemas.AddressId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete an address of a contact of the current user."""
    crud.delete_address(db, contact_id, address_id, current_user)
    return {"data": "Ok"}

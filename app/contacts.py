"""Contact management routes for the Contacts API."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from . import schemas, crud
from .auth import get_current_user
from .core import get_settings
from .database import get_db
from .models import User

router = APIRouter(prefix="/api/contacts", tags=["contacts"])
settings = get_settings()


@router.post("", response_model=schemas.WebResponse[schemas.ContactOut])
def create_contact(
    contact_in: schemas.ContactCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a new contact owned by the current user.

    Args:
        contact_in (ContactCreate): Contact input data.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Returns:
        dict: Envelope with the created contact.
    """
    return {"data": crud.create_contact(db, contact_in, current_user)}


@router.get("", response_model=schemas.PageResponse[schemas.ContactOut])
def search_contacts(
    name: str | None = Query(None),
    email: str | None = Query(None),
    phone: str | None = Query(None),
    page: int = Query(1, ge=1, le=schemas.MAX_ID // settings.MAX_PAGE_SIZE),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Search contacts belonging to the current user.

    Filters are optional, case-insensitive substring matches and are
    combined with AND. ``name`` matches the first or the last name.

    Args:
        name (str | None): Part of the first or last name.
        email (str | None): Part of the email address.
        phone (str | None): Part of the phone number.
        page (int): 1-based page number.
        size (int): Number of contacts per page.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Returns:
        dict: Contacts of the page and the paging metadata.
    """
    query = schemas.ContactSearch(
        name=name, email=email, phone=phone, page=page, size=size
    )
    contacts, paging = crud.search_contacts(db, current_user, query)
    return {"data": contacts, "paging": paging}


@router.get("/{contact_id}", response_model=schemas.WebResponse[schemas.ContactOut])
def get_contact(
    contact_id: schemas.ContactId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Retrieve a single contact by ID for the current user.

    Raises:
        NotFoundError: If contact is not found.
    """
    return {"data": crud.get_contact(db, contact_id, current_user)}


@router.put("/{contact_id}", response_model=schemas.WebResponse[schemas.ContactOut])
def update_contact(
    contact_id: schemas.ContactId,
    contact_in: schemas.ContactUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Replace the fields of an existing contact.

    Fields missing from the request are cleared.

    Raises:
        NotFoundError: If contact is not found.
    """
    return {"data": crud.update_contact(db, contact_id, contact_in, current_user)}


@router.delete("/{contact_id}", response_model=schemas.WebResponse[str])
def remove_contact(
    contact_id: schemas.ContactId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a contact owned by the current user, with its addresses.

    Raises:
        NotFoundError: If contact is not found.
    """
    crud.delete_contact(db, contact_id, current_user)
    return {"data": "Ok"}

"""CRUD operations for users, contacts and addresses.

This module contains database interaction logic isolated from FastAPI
route handlers. Contact lookups are always filtered by the owning user,
and address lookups by a contact that was itself resolved for that user,
so records outside the caller's ownership chain behave as missing.
"""

import logging
import math

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

CONTACT_NOT_FOUND = "Contact is not found"
ADDRESS_NOT_FOUND = "Address is not found"


def create_user(
    db: Session, user_in: schemas.UserCreate, hashed_password: str
) -> models.User:
    """
    Create and persist a new user.

    Args:
        db (Session): SQLAlchemy database session.
        user_in (UserCreate): Incoming user data.
        hashed_password (str): Securely hashed password.

    Raises:
        BadRequestError: If the username is already taken.

    Returns:
        User: Newly created user instance.
    """
    if get_user_by_username(db, user_in.username):
        raise BadRequestError("Username already exists")

    user = models.User(
        username=user_in.username,
        password=hashed_password,
        name=user_in.name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.username)
    return user


def get_user_by_username(db: Session, username: str) -> models.User | None:
    """
    Retrieve a user by username.

    Args:
        db (Session): Database session.
        username (str): User identity key.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.username == username)
    ).scalar_one_or_none()


def get_user_by_token(db: Session, token: str) -> models.User | None:
    """Return the user currently holding ``token``, if any."""
    return db.execute(
        select(models.User).where(models.User.token == token)
    ).scalar_one_or_none()


def set_user_token(db: Session, user: models.User, token: str | None) -> models.User:
    """
    Store or clear the session token of a user.

    Args:
        db (Session): Database session.
        user (User): Target user.
        token (str | None): New token, ``None`` to log the user out.

    Returns:
        User: Updated user instance.
    """
    user.token = token
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session, user: models.User, name: str | None, hashed_password: str | None
) -> models.User:
    """Update the display name and/or password hash of a user."""
    if name is not None:
        user.name = name
    if hashed_password is not None:
        user.password = hashed_password
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Updated user %s", user.username)
    return user


def create_contact(
    db: Session, contact_in: schemas.ContactCreate, user: models.User
) -> models.Contact:
    """
    Create a new contact owned by the given user.

    Args:
        db (Session): Database session.
        contact_in (ContactCreate): Contact data.
        user (User): Owner of the contact.

    Returns:
        Contact: Newly created contact.
    """
    contact = models.Contact(**contact_in.model_dump(), username=user.username)
    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info("User %s created contact %s", user.username, contact.id)
    return contact


def get_contact(db: Session, contact_id: int, user: models.User) -> models.Contact:
    """
    Retrieve a single contact owned by the given user.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        user (User): Contact owner.

    Raises:
        NotFoundError: If the contact does not exist or belongs to
            another user.

    Returns:
        Contact: The contact.
    """
    contact = db.execute(
        select(models.Contact).where(
            models.Contact.id == contact_id,
            models.Contact.username == user.username,
        )
    ).scalar_one_or_none()
    if contact is None:
        raise NotFoundError(CONTACT_NOT_FOUND)
    return contact


def update_contact(
    db: Session, contact_id: int, contact_in: schemas.ContactUpdate, user: models.User
) -> models.Contact:
    """
    Replace the fields of a contact owned by the given user.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        contact_in (ContactUpdate): New contact data.
        user (User): Contact owner.

    Raises:
        NotFoundError: If the contact is not found.

    Returns:
        Contact: Updated contact.
    """
    contact = get_contact(db, contact_id, user)
    for key, value in contact_in.model_dump().items():
        setattr(contact, key, value)

    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info("User %s updated contact %s", user.username, contact.id)
    return contact


def delete_contact(db: Session, contact_id: int, user: models.User) -> None:
    """
    Delete a contact and its addresses.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        user (User): Contact owner.

    Raises:
        NotFoundError: If the contact is not found.
    """
    contact = get_contact(db, contact_id, user)
    db.delete(contact)
    db.commit()
    logger.info("User %s deleted contact %s", user.username, contact_id)


def search_contacts(
    db: Session, user: models.User, query: schemas.ContactSearch
) -> tuple[list[models.Contact], schemas.Paging]:
    """
    Search the contacts of a user, one page at a time.

    ``name`` matches the first or the last name; ``email`` and ``phone``
    match their own column. Every match is a case-insensitive substring
    match, with ``%`` and ``_`` taken literally, and all supplied
    filters must hold.

    Args:
        db (Session): Database session.
        user (User): Contact owner.
        query (ContactSearch): Filters and paging.

    Returns:
        tuple[list[Contact], Paging]: Contacts of the requested page and
        the paging metadata.
    """
    filters = [models.Contact.username == user.username]
    if query.name:
        filters.append(
            or_(
                models.Contact.first_name.icontains(query.name, autoescape=True),
                models.Contact.last_name.icontains(query.name, autoescape=True),
            )
        )
    if query.email:
        filters.append(models.Contact.email.icontains(query.email, autoescape=True))
    if query.phone:
        filters.append(models.Contact.phone.icontains(query.phone, autoescape=True))

    total_item = db.execute(
        select(func.count()).select_from(models.Contact).where(*filters)
    ).scalar_one()

    contacts = db.scalars(
        select(models.Contact)
        .where(*filters)
        .order_by(models.Contact.id)
        .offset((query.page - 1) * query.size)
        .limit(query.size)
    ).all()

    paging = schemas.Paging(
        page=query.page,
        total_item=total_item,
        total_page=math.ceil(total_item / query.size),
    )
    return list(contacts), paging


def create_address(
    db: Session, contact_id: int, address_in: schemas.AddressCreate, user: models.User
) -> models.Address:
    """
    Create an address for a contact owned by the given user.

    Raises:
        NotFoundError: If the contact is not found.
    """
    contact = get_contact(db, contact_id, user)
    address = models.Address(**address_in.model_dump(), contact_id=contact.id)
    db.add(address)
    db.commit()
    db.refresh(address)
    logger.info("User %s added address %s to contact %s", user.username, address.id, contact.id)
    return address


def get_address(
    db: Session, contact_id: int, address_id: int, user: models.User
) -> models.Address:
    """
    Retrieve an address through a contact owned by the given user.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        address_id (int): Address identifier.
        user (User): Contact owner.

    Raises:
        NotFoundError: If the contact is not found, or the address is
            missing or belongs to a different contact.

    Returns:
        Address: The address.
    """
    contact = get_contact(db, contact_id, user)
    address = db.execute(
        select(models.Address).where(
            models.Address.id == address_id,
            models.Address.contact_id == contact.id,
        )
    ).scalar_one_or_none()
    if address is None:
        raise NotFoundError(ADDRESS_NOT_FOUND)
    return address


def update_address(
    db: Session,
    contact_id: int,
    address_id: int,
    address_in: schemas.AddressUpdate,
    user: models.User,
) -> models.Address:
    """Replace the fields of an address; same lookup rules as :func:`get_address`."""
    address = get_address(db, contact_id, address_id, user)
    for key, value in address_in.model_dump().items():
        setattr(address, key, value)

    db.add(address)
    db.commit()
    db.refresh(address)
    logger.info("User %s updated address %s", user.username, address.id)
    return address


def delete_address(
    db: Session, contact_id: int, address_id: int, user: models.User
) -> None:
    """Delete an address; same lookup rules as :func:`get_address`."""
    address = get_address(db, contact_id, address_id, user)
    db.delete(address)
    db.commit()
    logger.info("User %s deleted address %s", user.username, address_id)


def list_addresses(
    db: Session, contact_id: int, user: models.User
) -> list[models.Address]:
    """
    Retrieve all addresses of a contact owned by the given user.

    Raises:
        NotFoundError: If the contact is not found.
    """
    contact = get_contact(db, contact_id, user)
    return list(
        db.scalars(
            select(models.Address)
            .where(models.Address.contact_id == contact.id)
            .order_by(models.Address.id)
        ).all()
    )

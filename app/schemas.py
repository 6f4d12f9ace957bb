from typing import Annotated, Generic, List, Optional, TypeVar

from fastapi import Path
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

T = TypeVar("T")

#: Largest value a database INTEGER column can hold
MAX_ID = 2**63 - 1

ContactId = Annotated[int, Path(ge=1, le=MAX_ID)]
AddressId = Annotated[int, Path(ge=1, le=MAX_ID)]


class WebResponse(BaseModel, Generic[T]):
    """Envelope wrapping every successful response."""

    data: T


class Paging(BaseModel):
    """Paging metadata returned with search results."""

    page: int
    total_item: int
    total_page: int


class PageResponse(BaseModel, Generic[T]):
    """Envelope for a page of results."""

    data: List[T]
    paging: Paging


class UserCreate(BaseModel):
    """Payload for registering a new user."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=100)


class UserLogin(BaseModel):
    """Credentials submitted to the login endpoint."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=100)


class UserUpdate(BaseModel):
    """Schema for updating the current user (all fields optional)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    password: Optional[str] = Field(default=None, min_length=1, max_length=100)


class UserOut(BaseModel):
    """Response schema for user data."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str


class TokenOut(BaseModel):
    """Session token issued at login."""

    token: str


class ContactBase(BaseModel):
    """Shared fields for contact schemas."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)

    @field_validator("email")
    @classmethod
    def email_max_length(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > 200:
            raise ValueError("email should have at most 200 characters")
        return value


class ContactCreate(ContactBase):
    """Schema for creating new contact."""

    pass


class ContactUpdate(ContactBase):
    """Schema for replacing the fields of an existing contact."""

    pass


class ContactOut(BaseModel):
    """Schema for returning contact with ID."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ContactSearch(BaseModel):
    """Filters and paging for contact search."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    page: int = 1
    size: int = 10


class AddressBase(BaseModel):
    """Shared fields for address schemas."""

    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    province: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=10)


class AddressCreate(AddressBase):
    """Schema for creating new address."""

    pass


class AddressUpdate(AddressBase):
    """Schema for replacing the fields of an existing address."""

    pass


class AddressOut(AddressBase):
    """Schema for returning address with ID."""

    model_config = ConfigDict(from_attributes=True)

    id: int

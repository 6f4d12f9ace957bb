"""Authentication related routes and helpers.

Sessions use opaque tokens stored on the user row: login issues a new
token, logout clears it, and every protected route resolves the token
from the ``Authorization`` header back to its user.
"""

import logging
import uuid

from fastapi import APIRouter, Depends
from fastapi.security import APIKeyHeader
from fastapi_limiter.depends import RateLimiter
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import schemas, crud
from .core import get_settings
from .database import get_db
from .errors import UnauthorizedError
from .models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
token_header = APIKeyHeader(name="Authorization", auto_error=False)
router = APIRouter(prefix="/api/users", tags=["auth"])

settings = get_settings()
login_limiter = RateLimiter(
    times=settings.LOGIN_RATE_LIMIT_TIMES, seconds=settings.LOGIN_RATE_LIMIT_SECONDS
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plain password with its hashed value."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a password hash using the configured context."""
    return pwd_context.hash(password)


def create_session_token() -> str:
    """Generate a new opaque session token."""
    return str(uuid.uuid4())


def parse_authorization(header: str | None) -> str | None:
    """
    Extract the token from an ``Authorization`` header value.

    Both ``Bearer <token>`` and a bare ``<token>`` are accepted.

    Args:
        header (str | None): Raw header value.

    Returns:
        str | None: The token, or ``None`` when the header is missing or blank.
    """
    if not header:
        return None
    value = header.strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == "bearer":
        return credentials.strip() or None
    return value or None


def get_current_user(
    authorization: str | None = Depends(token_header),
    db: Session = Depends(get_db),
) -> User:
    """Dependency that returns the user owning the request's session token."""

    token = parse_authorization(authorization)
    if token is None:
        raise UnauthorizedError()
    user = crud.get_user_by_token(db, token)
    if user is None:
        raise UnauthorizedError()
    return user


@router.post("", response_model=schemas.WebResponse[schemas.UserOut])
def register(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    """Register a new user."""

    hashed_password = get_password_hash(user_in.password)
    user = crud.create_user(db, user_in, hashed_password)
    return {"data": user}


@router.post(
    "/login",
    response_model=schemas.WebResponse[schemas.TokenOut],
    dependencies=[Depends(login_limiter)],
)
def login(credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    """Authenticate user and issue a new session token."""

    user = crud.get_user_by_username(db, credentials.username)
    if not user or not verify_password(credentials.password, user.password):
        raise UnauthorizedError("Username or password wrong")
    user = crud.set_user_token(db, user, create_session_token())
    logger.info("User %s logged in", user.username)
    return {"data": {"token": user.token}}


@router.delete("/logout", response_model=schemas.WebResponse[str])
def logout(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Invalidate the session token of the current user."""

    crud.set_user_token(db, current_user, None)
    logger.info("User %s logged out", current_user.username)
    return {"data": "Ok"}

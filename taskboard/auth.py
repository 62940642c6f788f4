# PURPOSE: password hashing (bcrypt), JWT issue/verify (python-jose) and the
# get_current_user dependency that turns a bearer token into a UserDB row.

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
import bcrypt
from sqlalchemy.orm import Session

from .config import settings
from .db_models import UserDB
from .errors import AuthenticationError
from .store_db import get_db, get_user

logger = logging.getLogger("taskboard.auth")

# Bearer token from the Authorization header; the login endpoint takes JSON,
# tokenUrl only feeds the OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# --- Password helpers (bcrypt, no passlib) ---

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a bcrypt hash for the given plain password."""
    if not isinstance(password, str):
        raise TypeError("password must be a string")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        # malformed hash
        return False


# --- JWT helpers ---

def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user_id: int, extra: Dict[str, Any] | None = None) -> str:
    """
    Create a signed JWT whose `sub` is the user id.
    Expiration controlled by settings.JWT_EXPIRE_MIN.
    """
    payload: Dict[str, Any] = {**(extra or {}), "sub": str(user_id)}
    payload["exp"] = _now_utc() + timedelta(minutes=settings.JWT_EXPIRE_MIN)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id carried by a valid token; raise AuthenticationError otherwise."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as err:
        raise AuthenticationError("Not authorized, token failed") from err
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise AuthenticationError("Not authorized, token failed") from err


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> UserDB:
    """Resolve the request's bearer token to the authenticated user row."""
    if not token:
        raise AuthenticationError("Not authorized, no token")
    user = get_user(db, decode_access_token(token))
    if user is None:
        raise AuthenticationError("User not found")
    return user

# PURPOSE: /auth/signup, /auth/login, /auth/me, /auth/profile

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from ..auth import create_access_token, get_current_user, hash_password, verify_password
from ..config import settings
from ..db_models import UserDB
from ..errors import AuthenticationError
from ..models import AuthResponse, LoginRequest, ProfileResponse, ProfileUpdate, SignupRequest, UserResponse
from ..rate_limit import limiter
from ..store_db import create_user, get_db, get_user_by_email, update_user_profile

logger = logging.getLogger("taskboard.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_SIGNUP)
def signup(
    request: Request, response: Response, payload: SignupRequest, db: Session = Depends(get_db)
):
    user = create_user(
        db,
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    logger.info("user signed up user_id=%s", user.id)
    return {"success": True, "token": create_access_token(user.id), "user": user}


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
def login(
    request: Request, response: Response, payload: LoginRequest, db: Session = Depends(get_db)
):
    user = get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("failed login email=%s", payload.email)
        raise AuthenticationError("Invalid credentials")
    logger.info("user logged in user_id=%s", user.id)
    return {"success": True, "token": create_access_token(user.id), "user": user}


@router.get("/me", response_model=UserResponse)
def me(user: UserDB = Depends(get_current_user)):
    return {"success": True, "user": user}


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    user = update_user_profile(db, user, payload)
    return {"success": True, "message": "Profile updated successfully", "user": user}

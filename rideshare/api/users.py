"""User login, registration and lookup endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rideshare.api.dependencies import (
    get_current_user_id,
    get_identity_verifier,
    get_session_store,
)
from rideshare.database import get_db
from rideshare.schemas.envelope import ResultResponse
from rideshare.schemas.user import (
    FcmTokenRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserLookupResponse,
    UserResponse,
)
from rideshare.services.identity import IdentityVerificationError, IdentityVerifier
from rideshare.services.sessions import SessionStore
from rideshare.services.users import (
    create_user,
    get_user,
    get_user_by_email,
    set_fcm_token,
    set_phone_number,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Log in with a Google ID token.

    Known users with a phone number are logged in. Anyone else gets a session
    and `needs_register`; a first-time user is saved with name and email only.
    """
    try:
        identity = await verifier.verify(credentials.token)
    except IdentityVerificationError as e:
        logger.info(f"Could not verify login, returning fail: {e}")
        return LoginResponse(success=False, needs_register=False)

    user = get_user_by_email(db, identity.email)
    if user is None:
        logger.info("Received a login from an unregistered user, saving their info")
        try:
            user = create_user(db, identity.email, identity.name)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save new user {identity.email}: {e}")
            return LoginResponse(success=False, needs_register=False)

        session_store.create(response, user.id)
        return LoginResponse(success=False, needs_register=True, user_id=user.id)

    session_store.create(response, user.id)
    if not user.is_registered:
        logger.info(f"User {user.id} logged in but has not finished registering")
        return LoginResponse(success=False, needs_register=True, user_id=user.id)

    logger.info(f"Verified login from user {user.id}")
    return LoginResponse(success=True, needs_register=False, user_id=user.id)


@router.post("/logout", response_model=ResultResponse, response_model_exclude_none=True)
async def logout(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    response: Response,
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Log out by deleting the session cookie."""
    logger.info(f"Logging out user {current_user_id}")
    session_store.destroy(response)
    return ResultResponse(result=1)


@router.post("/register", response_model=RegisterResponse, response_model_exclude_none=True)
async def register(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    registration: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Finish registration by saving the user's phone number."""
    user = set_phone_number(db, current_user_id, registration.phnum)
    if user is None:
        return RegisterResponse(success=False, error="user not found")
    return RegisterResponse(success=True)


@router.get(
    "/by_id/{user_id}", response_model=UserLookupResponse, response_model_exclude_none=True
)
async def get_user_by_id(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get another user's public profile."""
    user = get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    return UserLookupResponse(result=1, user=UserResponse.model_validate(user))


@router.post("/register_fcm", response_model=ResultResponse, response_model_exclude_none=True)
async def register_fcm(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    fcm: FcmTokenRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Save the device token used for push notifications."""
    user = set_fcm_token(db, current_user_id, fcm.token)
    if user is None:
        return ResultResponse(result=0, error="user not found")
    return ResultResponse(result=1)

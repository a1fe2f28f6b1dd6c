"""FastAPI dependencies for sessions, collaborators and services.

The session store, identity verifier and notifier live on ``app.state`` and
are chosen in ``create_app``; tests pass their own.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from rideshare.database import get_db
from rideshare.services.identity import IdentityVerifier
from rideshare.services.notifications import PostNotifier
from rideshare.services.posts import PostService
from rideshare.services.sessions import SessionStore


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_notifier(request: Request) -> PostNotifier:
    return request.app.state.notifier


def get_current_user_id(
    request: Request,
    session_store: Annotated[SessionStore, Depends(get_session_store)],
) -> int:
    """Get the logged-in user's ID from the session cookie.

    Declared first on every protected endpoint so a missing or invalid session
    is rejected before anything touches the database.
    """
    user_id = session_store.validate(request)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="not logged in",
        )
    return user_id


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db)

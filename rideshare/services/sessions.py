"""Signed session cookies binding a browser or device to a user ID."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Protocol

from fastapi import Request, Response
from jose import JWTError, jwt

from rideshare.config import Settings

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Creates, validates and destroys login sessions."""

    def create(self, response: Response, user_id: int) -> None: ...

    def validate(self, request: Request) -> int | None: ...

    def destroy(self, response: Response) -> None: ...


class SignedCookieSessionStore:
    """Keeps the session in an HTTP-only cookie holding a signed JWT.

    Nothing is stored server side; a cookie is valid as long as its signature
    checks out and it has not expired.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        cookie_name: str = "session",
        expiration_minutes: int = 10080,
        secure: bool = False,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.cookie_name = cookie_name
        self.expiration = timedelta(minutes=expiration_minutes)
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "SignedCookieSessionStore":
        return cls(
            secret=settings.session_secret,
            algorithm=settings.session_algorithm,
            cookie_name=settings.session_cookie_name,
            expiration_minutes=settings.session_expiration_minutes,
            secure=settings.session_cookie_secure,
        )

    def encode(self, user_id: int) -> str:
        """Sign a session token for a user."""
        expire = datetime.now(UTC) + self.expiration
        return jwt.encode(
            {"sub": str(user_id), "exp": expire}, self.secret, algorithm=self.algorithm
        )

    def decode(self, token: str) -> int | None:
        """Return the user ID from a session token, or None if it is invalid or expired."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None

        subject = payload.get("sub")
        if subject is None:
            return None
        try:
            return int(subject)
        except ValueError:
            return None

    def create(self, response: Response, user_id: int) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=self.encode(user_id),
            max_age=int(self.expiration.total_seconds()),
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )
        logger.info(f"Started session for user {user_id}")

    def validate(self, request: Request) -> int | None:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        user_id = self.decode(token)
        if user_id is None:
            logger.info("Rejected invalid session cookie")
        return user_id

    def destroy(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name, httponly=True, secure=self.secure, samesite="lax"
        )

"""Google sign-in token verification."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from rideshare.config import Settings

logger = logging.getLogger(__name__)


class IdentityVerificationError(Exception):
    """The identity provider refused the token or could not be reached."""


@dataclass(frozen=True)
class VerifiedIdentity:
    email: str
    name: str | None = None


class IdentityVerifier(Protocol):
    """Exchanges an opaque third-party token for a verified identity."""

    async def verify(self, token: str) -> VerifiedIdentity: ...


class GoogleIdentityVerifier:
    """Verifies Google ID tokens against Google's tokeninfo endpoint."""

    def __init__(
        self,
        tokeninfo_url: str,
        client_id: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.tokeninfo_url = tokeninfo_url
        self.client_id = client_id
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleIdentityVerifier":
        return cls(
            tokeninfo_url=settings.google_tokeninfo_url,
            client_id=settings.google_client_id,
        )

    async def verify(self, token: str) -> VerifiedIdentity:
        """Verify a token and return the email and name it was issued for.

        Raises IdentityVerificationError if the token is invalid, expired, was
        issued for another client, or the email is unverified.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.tokeninfo_url, params={"id_token": token})
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Google tokeninfo: {e}")
            raise IdentityVerificationError("identity provider unavailable") from e

        if response.status_code != 200:
            raise IdentityVerificationError(f"token rejected ({response.status_code})")

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse tokeninfo response as JSON: {e}")
            raise IdentityVerificationError("malformed tokeninfo response") from e
        if not isinstance(data, dict):
            raise IdentityVerificationError("malformed tokeninfo response")

        if self.client_id and data.get("aud") != self.client_id:
            raise IdentityVerificationError("token issued for another client")

        # tokeninfo returns booleans as strings
        if str(data.get("email_verified", "false")).lower() != "true":
            raise IdentityVerificationError("email not verified")

        email = data.get("email")
        if not email:
            raise IdentityVerificationError("token has no email")

        return VerifiedIdentity(email=email.lower(), name=data.get("name"))

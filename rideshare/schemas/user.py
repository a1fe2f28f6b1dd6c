"""User and login schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rideshare.schemas.envelope import ResultResponse


class LoginRequest(BaseModel):
    """Login with a Google ID token."""

    model_config = ConfigDict(extra="forbid")

    token: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login outcome. Uses `success` rather than `result` for older clients."""

    success: bool
    needs_register: bool
    user_id: int | None = None


class RegisterRequest(BaseModel):
    """Complete registration by attaching a phone number."""

    model_config = ConfigDict(extra="forbid")

    phnum: str = Field(..., min_length=1, max_length=32)


class RegisterResponse(BaseModel):
    """Registration outcome. Uses `success` rather than `result` for older clients."""

    success: bool
    error: str | None = None


class FcmTokenRequest(BaseModel):
    """Register the device's push token."""

    model_config = ConfigDict(extra="forbid")

    token: str = Field(..., min_length=1, max_length=512)


class UserResponse(BaseModel):
    """Public user information. The push token is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    email: str
    phnum: str | None
    banned: bool
    created_at: datetime


class UserLookupResponse(ResultResponse):
    user: UserResponse | None = None

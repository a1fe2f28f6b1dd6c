"""Pydantic schemas for API requests and responses."""

from rideshare.schemas.envelope import ResultResponse
from rideshare.schemas.post import (
    AddDriverRequest,
    PostCreate,
    PostCreatedResponse,
    PostCreateRequest,
    PostDocument,
    PostEdit,
    PostIdRequest,
    PostListResponse,
    PostLookupResponse,
    PostResponse,
    PostUpdateRequest,
)
from rideshare.schemas.report import ReportCreate, ReportCreatedResponse, ReportRequest
from rideshare.schemas.user import (
    FcmTokenRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserLookupResponse,
    UserResponse,
)

__all__ = [
    "ResultResponse",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "FcmTokenRequest",
    "UserResponse",
    "UserLookupResponse",
    "PostCreate",
    "PostDocument",
    "PostEdit",
    "PostCreateRequest",
    "PostUpdateRequest",
    "PostIdRequest",
    "AddDriverRequest",
    "PostResponse",
    "PostLookupResponse",
    "PostListResponse",
    "PostCreatedResponse",
    "ReportCreate",
    "ReportRequest",
    "ReportCreatedResponse",
]

"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccountCreateRequest,
    AccountResponse,
    AccountsListResponse,
    AccountUpdateRequest,
    AuthenticatedUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PublicAccount,
)
from app.schemas.health import HealthResponse
from app.schemas.person import (
    DistinctValuesResponse,
    PersonCreateRequest,
    PersonEnvelope,
    PersonListResponse,
    PersonResponse,
    PersonUpdateRequest,
    RegisterRequest,
    RegisterResponse,
)

__all__ = [
    "AccountCreateRequest",
    "AccountResponse",
    "AccountUpdateRequest",
    "AccountsListResponse",
    "AuthenticatedUser",
    "DistinctValuesResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PersonCreateRequest",
    "PersonEnvelope",
    "PersonListResponse",
    "PersonResponse",
    "PersonUpdateRequest",
    "PublicAccount",
    "RegisterRequest",
    "RegisterResponse",
]

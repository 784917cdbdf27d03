"""Request/response schemas for auth and account endpoints."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.enums import Role


class LoginRequest(BaseModel):
    """Credentials for login. Presence is checked by the endpoint so it can answer 400."""

    email: str | None = Field(default=None, max_length=255, description="Account email")
    password: str | None = Field(default=None, max_length=128, description="Password")


class PublicAccount(BaseModel):
    """Account projection safe to return to clients (never includes the password hash)."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    role: Role
    person_record_id: str | None = None


class AuthenticatedUser(PublicAccount):
    """The live account behind a verified session token."""


class LoginResponse(BaseModel):
    """Account data plus the token that was also set as the auth cookie."""

    data: PublicAccount
    access_token: str = Field(..., description="JWT access token (also set as the auth_token cookie)")
    token_type: str = Field(default="bearer", description="Token type")


class AccountResponse(BaseModel):
    data: PublicAccount


class AccountsListResponse(BaseModel):
    """Response for GET /auth/users (staff only)."""

    data: list[PublicAccount]


class AccountCreateRequest(BaseModel):
    """Admin console account creation."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    role: Role = Role.USER
    person_record_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("person_record_id", "personRecordId"),
    )


class AccountUpdateRequest(BaseModel):
    """Partial account update; omitted fields are left unchanged."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    role: Role | None = None


class MessageResponse(BaseModel):
    message: str

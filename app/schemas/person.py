"""Pydantic schemas for person records: request bodies (snake_case or camelCase keys) and responses."""

from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.models.enums import RecordType, Role


def _alias(snake: str) -> AliasChoices:
    """Accept both snake_case and camelCase keys for a field."""
    head, *rest = snake.split("_")
    camel = head + "".join(part.capitalize() for part in rest)
    return AliasChoices(snake, camel)


_TEXT_FIELDS = (
    "full_name",
    "preferred_name",
    "gender",
    "birth_date",
    "email",
    "phone",
    "city",
    "country",
    "occupation",
    "influencer_category",
    "primary_platform",
    "engagement_rate_tier",
    "interests",
    "notes",
    "secondary_platform",
    "collaboration_status",
    "portfolio_url",
    "last_contact_date",
    "record_type",
)


class PersonFields(BaseModel):
    """
    Profile fields shared by create, update and registration bodies.

    Strings are trimmed and blank strings become None. languages may be a
    list or a comma-separated string and is stored comma-joined.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    full_name: str | None = Field(default=None, validation_alias=_alias("full_name"))
    preferred_name: str | None = Field(default=None, validation_alias=_alias("preferred_name"))
    gender: str | None = None
    birth_date: str | None = Field(default=None, validation_alias=_alias("birth_date"))
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    occupation: str | None = None
    languages: str | None = None
    influencer_category: str | None = Field(default=None, validation_alias=_alias("influencer_category"))
    primary_platform: str | None = Field(default=None, validation_alias=_alias("primary_platform"))
    secondary_platform: str | None = Field(default=None, validation_alias=_alias("secondary_platform"))
    followers_count: int | None = Field(default=None, validation_alias=_alias("followers_count"))
    secondary_followers_count: int | None = Field(
        default=None, validation_alias=_alias("secondary_followers_count")
    )
    total_followers_count: int | None = Field(default=None, validation_alias=_alias("total_followers_count"))
    average_monthly_reach: int | None = Field(default=None, validation_alias=_alias("average_monthly_reach"))
    engagement_rate: float | None = Field(default=None, validation_alias=_alias("engagement_rate"))
    engagement_rate_tier: str | None = Field(default=None, validation_alias=_alias("engagement_rate_tier"))
    interests: str | None = None
    notes: str | None = None
    portfolio_url: str | None = Field(default=None, validation_alias=_alias("portfolio_url"))
    collaboration_status: str | None = Field(default=None, validation_alias=_alias("collaboration_status"))
    last_contact_date: str | None = Field(default=None, validation_alias=_alias("last_contact_date"))
    record_type: str | None = Field(default=None, validation_alias=_alias("record_type"))

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("languages", mode="before")
    @classmethod
    def join_languages(cls, v: Any) -> Any:
        if isinstance(v, list):
            parts = [entry.strip() for entry in v if isinstance(entry, str) and entry.strip()]
            return ", ".join(parts) or None
        if isinstance(v, str):
            return v.strip() or None
        return v

    def profile_updates(self) -> dict[str, Any]:
        """Fields the client actually sent (explicit nulls included), minus record_type."""
        data = self.model_dump(exclude_unset=True)
        data.pop("record_type", None)
        return data


class PersonCreateRequest(PersonFields):
    """Body for POST /users and POST /influencers."""

    record_id: str | None = Field(default=None, validation_alias=_alias("record_id"))
    role: str | None = None


class PersonUpdateRequest(PersonFields):
    """Body for PATCH /users/{slug}; role may be set but not to null."""

    role: str | None = None


class RegisterRequest(PersonFields):
    """Self-service signup: full profile plus password confirmation."""

    password: str | None = Field(default=None, max_length=128)
    confirm_password: str | None = Field(
        default=None, max_length=128, validation_alias=_alias("confirm_password")
    )


class PersonResponse(BaseModel):
    """Person record as returned by the API (snake_case)."""

    model_config = ConfigDict(from_attributes=True)

    record_id: str
    record_type: RecordType
    full_name: str
    preferred_name: str | None = None
    gender: str | None = None
    birth_date: date | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    occupation: str | None = None
    influencer_category: str | None = None
    primary_platform: str | None = None
    followers_count: int | None = None
    total_followers_count: int | None = None
    engagement_rate: float | None = None
    engagement_rate_tier: str | None = None
    interests: str | None = None
    notes: str | None = None
    secondary_platform: str | None = None
    secondary_followers_count: int | None = None
    average_monthly_reach: int | None = None
    collaboration_status: str | None = None
    languages: str | None = None
    portfolio_url: str | None = None
    last_contact_date: date | None = None
    role: Role = Role.USER


class PersonEnvelope(BaseModel):
    data: PersonResponse


class PersonListResponse(BaseModel):
    data: list[PersonResponse]


class DistinctValuesResponse(BaseModel):
    data: list[str]


class PublicAccountSummary(BaseModel):
    id: str
    email: str
    role: Role


class RegisterData(BaseModel):
    account: PublicAccountSummary
    profile: PersonResponse


class RegisterResponse(BaseModel):
    data: RegisterData


def to_person_response(row: Any) -> PersonResponse:
    return PersonResponse.model_validate(row)


def to_person_response_list(rows: list[Any]) -> list[PersonResponse]:
    return [to_person_response(row) for row in rows]

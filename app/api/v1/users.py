"""Person record endpoints addressed by record id ('IND-001', 'INF-002') or type prefix."""

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import CurrentUser, DbSession, OptionalUser, bad_request, forbidden, not_found
from app.api.v1.params import build_filters, first_param
from app.models.enums import ROLE_VALUES, RecordType, Role
from app.schemas.auth import AuthenticatedUser
from app.schemas.person import (
    PersonCreateRequest,
    PersonEnvelope,
    PersonListResponse,
    PersonUpdateRequest,
    to_person_response,
    to_person_response_list,
)
from app.services import record_store
from app.services.accounts import AccountConflictError, AccountServiceError, update_person_record
from app.services.permissions import can_act_on_account, can_assign_role, can_create_role
from app.services.person_fields import (
    infer_record_type_from_id,
    parse_record_type,
    with_derived_metrics,
)

logger = logging.getLogger(__name__)
router = APIRouter()

RECORD_TYPE_ERROR = 'record_type must be either "individual" or "influencer"'
RECORD_PREFIX_ERROR = "record_id must start with INF or IND"
ROLE_ERROR = f"role must be one of: {', '.join(ROLE_VALUES)}"

CREATE_REQUIRED_FIELDS = (
    "full_name",
    "preferred_name",
    "gender",
    "birth_date",
    "email",
    "phone",
    "country",
    "city",
    "occupation",
    "languages",
)

_PREFIX_TYPES = {"IND": RecordType.INDIVIDUAL, "INF": RecordType.INFLUENCER}


def _normalize_slug(slug: str) -> str:
    normalized = (slug or "").strip().upper()
    if not normalized:
        raise bad_request("slug is required")
    return normalized


def _slug_record_type(normalized: str) -> RecordType:
    record_type = infer_record_type_from_id(normalized)
    if record_type is None:
        raise bad_request(RECORD_PREFIX_ERROR)
    return record_type


def _require_user(user: AuthenticatedUser | None) -> AuthenticatedUser:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def _parse_role(value: str) -> Role:
    role = Role.parse(value)
    if role is None:
        raise bad_request(ROLE_ERROR)
    return role


@router.get("", response_model=PersonListResponse)
def get_users(request: Request, db: DbSession) -> PersonListResponse:
    """List individuals and influencers (or one type via record_type), ordered by record id."""
    params = request.query_params
    raw_type = first_param(params, "record_type", "recordType")
    record_type = parse_record_type(raw_type)
    if raw_type and record_type is None:
        raise bad_request(RECORD_TYPE_ERROR)

    record_types = [record_type] if record_type else list(RecordType)
    rows = []
    for rt in record_types:
        rows.extend(record_store.list_records(db, rt, build_filters(rt, params)))
    rows.sort(key=lambda row: row.record_id)
    return PersonListResponse(data=to_person_response_list(rows))


@router.post("", response_model=PersonEnvelope, status_code=status.HTTP_201_CREATED)
def create_user_record(
    body: PersonCreateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> PersonEnvelope:
    """
    Create a person record. An optional role is only accepted when the caller
    may create accounts of that role.
    """
    record_type = parse_record_type(body.record_type)
    if record_type is None:
        raise bad_request(RECORD_TYPE_ERROR)
    for field in CREATE_REQUIRED_FIELDS:
        if not getattr(body, field):
            raise bad_request(f"{field} is required")

    role: Role | None = None
    if body.role:
        role = _parse_role(body.role)
        if not can_create_role(current_user.role, role):
            raise forbidden()

    record_id = body.record_id.strip().upper() if body.record_id else None
    if record_id and record_store.get_record_any_type(db, record_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="record_id already exists")

    payload = body.model_dump(exclude={"record_type", "record_id", "role", "engagement_rate", "engagement_rate_tier"})
    payload = with_derived_metrics(payload)
    payload["last_contact_date"] = body.last_contact_date or date.today()

    try:
        row = record_store.create_record(db, record_type, payload, record_id=record_id, role=role)
    except SQLAlchemyError as e:
        logger.exception("Create record failed")
        raise HTTPException(status_code=500, detail="Unable to save record") from e
    return PersonEnvelope(data=to_person_response(row))


@router.get("/{slug}", response_model=PersonEnvelope | PersonListResponse)
def get_user_by_slug(slug: str, request: Request, db: DbSession) -> PersonEnvelope | PersonListResponse:
    """'IND' or 'INF' lists that type (with filters); any other slug is a record id."""
    normalized = _normalize_slug(slug)
    if normalized in _PREFIX_TYPES:
        record_type = _PREFIX_TYPES[normalized]
        rows = record_store.list_records(db, record_type, build_filters(record_type, request.query_params))
        return PersonListResponse(data=to_person_response_list(rows))

    record_type = _slug_record_type(normalized)
    row = record_store.get_record(db, record_type, normalized)
    if row is None:
        raise not_found()
    return PersonEnvelope(data=to_person_response(row))


@router.patch("/{slug}", response_model=PersonEnvelope)
def patch_user_by_slug(
    slug: str,
    body: PersonUpdateRequest,
    current_user: OptionalUser,
    db: DbSession,
) -> PersonEnvelope:
    """
    Partial update. Follower totals, engagement rate and tier are recomputed
    from the submitted counts, and last_contact_date is set to today.
    """
    normalized = _normalize_slug(slug)
    record_type = _slug_record_type(normalized)
    user = _require_user(current_user)

    if body.record_type and parse_record_type(body.record_type) is not record_type:
        raise bad_request("record_type does not match record_id prefix")

    role: Role | None = None
    if "role" in body.model_fields_set:
        if body.role is None:
            raise bad_request("role cannot be null")
        role = _parse_role(body.role)

    existing = record_store.get_record(db, record_type, normalized)
    if existing is None:
        raise not_found()
    if not can_act_on_account(user, existing.record_id, existing.role, "update"):
        raise forbidden()
    if role is not None and not can_assign_role(user, existing.record_id, existing.role, role):
        raise forbidden()

    updates = with_derived_metrics(body.profile_updates())
    updates["last_contact_date"] = date.today()

    try:
        row = update_person_record(db, record_type, normalized, updates, role=role)
    except AccountConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except AccountServiceError as e:
        raise bad_request(e.message) from e
    if row is None:
        raise not_found()
    return PersonEnvelope(data=to_person_response(row))


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_by_slug(slug: str, current_user: OptionalUser, db: DbSession) -> Response:
    """Hard-delete a person record (and any login attached to it)."""
    normalized = _normalize_slug(slug)
    record_type = _slug_record_type(normalized)
    user = _require_user(current_user)

    existing = record_store.get_record(db, record_type, normalized)
    if existing is None:
        raise not_found()
    if not can_act_on_account(user, existing.record_id, existing.role, "delete"):
        raise forbidden()

    if not record_store.delete_record(db, record_type, normalized):
        raise not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

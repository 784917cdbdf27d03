"""Influencer endpoints. Ids are normalized, so '7', 'inf7' and 'INF-007' address the same record."""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import CurrentUser, DbSession, bad_request, forbidden, not_found
from app.api.v1.params import build_filters
from app.models.enums import RecordType
from app.schemas.auth import MessageResponse
from app.schemas.person import (
    PersonCreateRequest,
    PersonListResponse,
    PersonResponse,
    PersonUpdateRequest,
    to_person_response,
    to_person_response_list,
)
from app.services import record_store
from app.services.accounts import AccountConflictError, AccountServiceError, update_person_record
from app.services.permissions import can_act_on_account
from app.services.person_fields import normalize_record_id

logger = logging.getLogger(__name__)
router = APIRouter()

INFLUENCER = RecordType.INFLUENCER


def _check_record_type(submitted: str | None) -> None:
    if submitted is not None and submitted.lower() != INFLUENCER.value:
        raise bad_request(f'recordType must be "{INFLUENCER.value}" for this endpoint')


@router.get("", response_model=PersonListResponse)
def get_influencers(request: Request, db: DbSession) -> PersonListResponse:
    """Influencers filtered by city, category, engagement tier and collaboration status."""
    rows = record_store.list_records(db, INFLUENCER, build_filters(INFLUENCER, request.query_params))
    return PersonListResponse(data=to_person_response_list(rows))


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
def create_influencer(
    body: PersonCreateRequest,
    _user: CurrentUser,
    db: DbSession,
) -> PersonResponse:
    if not body.full_name:
        raise bad_request("fullName is required")
    _check_record_type(body.record_type)

    record_id = normalize_record_id(body.record_id, INFLUENCER) if body.record_id else None
    if record_id and record_store.get_record_any_type(db, record_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="record_id already exists")

    payload = body.model_dump(exclude={"record_type", "record_id", "role"}, exclude_unset=True)
    try:
        row = record_store.create_record(db, INFLUENCER, payload, record_id=record_id)
    except SQLAlchemyError as e:
        logger.exception("Create influencer failed")
        raise HTTPException(status_code=500, detail="Unable to save record") from e
    return to_person_response(row)


@router.get("/{influencer_id}", response_model=PersonResponse)
def get_influencer(influencer_id: str, db: DbSession) -> PersonResponse:
    row = record_store.get_record(db, INFLUENCER, normalize_record_id(influencer_id, INFLUENCER))
    if row is None:
        raise not_found()
    return to_person_response(row)


@router.patch("/{influencer_id}", response_model=PersonResponse)
def update_influencer(
    influencer_id: str,
    body: PersonUpdateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> PersonResponse:
    """Partial update; record id and type in the body are ignored, role is not editable here."""
    record_id = normalize_record_id(influencer_id, INFLUENCER)
    existing = record_store.get_record(db, INFLUENCER, record_id)
    if existing is None:
        raise not_found()
    if not can_act_on_account(current_user, existing.record_id, existing.role, "update"):
        raise forbidden()

    try:
        row = update_person_record(db, INFLUENCER, record_id, body.profile_updates())
    except AccountConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except AccountServiceError as e:
        raise bad_request(e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Update influencer failed", extra={"record_id": record_id})
        raise HTTPException(status_code=500, detail="Unable to update record") from e
    if row is None:
        raise not_found()
    return to_person_response(row)


@router.delete("/{influencer_id}", response_model=MessageResponse)
def delete_influencer(influencer_id: str, current_user: CurrentUser, db: DbSession) -> MessageResponse:
    record_id = normalize_record_id(influencer_id, INFLUENCER)
    existing = record_store.get_record(db, INFLUENCER, record_id)
    if existing is None:
        raise not_found()
    if not can_act_on_account(current_user, existing.record_id, existing.role, "delete"):
        raise forbidden()
    if not record_store.delete_record(db, INFLUENCER, record_id):
        raise not_found()
    return MessageResponse(message="Deleted successfully")

"""Distinct filter values (cities, categories, tiers, statuses) for building filter dropdowns."""

from fastapi import APIRouter, HTTPException, Request, status

from app.api.deps import DbSession, bad_request
from app.api.v1.params import first_param
from app.schemas.person import DistinctValuesResponse
from app.services import record_store
from app.services.person_fields import parse_record_type

router = APIRouter()


@router.get("/{param}", response_model=DistinctValuesResponse)
def get_distinct_values(param: str, request: Request, db: DbSession) -> DistinctValuesResponse:
    """
    Sorted distinct values of city, influencer_category, engagement_rate_tier or
    collaboration_status, optionally restricted by record_type.
    """
    field = (param or "").strip().lower()
    if not field:
        raise bad_request("param is required")
    if field not in record_store.DISTINCT_FIELDS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unsupported param")

    raw_type = first_param(request.query_params, "record_type", "recordType")
    record_type = parse_record_type(raw_type)
    if raw_type and record_type is None:
        raise bad_request('record_type must be either "individual" or "influencer"')

    return DistinctValuesResponse(data=record_store.list_distinct_values(db, field, record_type))

"""Person record store: CRUD and filtered listing over the people table."""

import logging
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from app.models import PersonRecord
from app.models.enums import RecordType, Role
from app.core.security import normalize_email
from app.services.person_fields import parse_date, parse_sequential_id

logger = logging.getLogger(__name__)

# Profile columns callers may set. Id, type, role and login columns are managed separately.
PROFILE_FIELDS: frozenset[str] = frozenset(
    {
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
        "followers_count",
        "total_followers_count",
        "engagement_rate",
        "engagement_rate_tier",
        "interests",
        "notes",
        "secondary_platform",
        "secondary_followers_count",
        "average_monthly_reach",
        "collaboration_status",
        "languages",
        "portfolio_url",
        "last_contact_date",
    }
)
_DATE_FIELDS = frozenset({"birth_date", "last_contact_date"})

DistinctField = Literal["influencer_category", "engagement_rate_tier", "city", "collaboration_status"]
DISTINCT_FIELDS: frozenset[str] = frozenset(
    {"influencer_category", "engagement_rate_tier", "city", "collaboration_status"}
)


@dataclass(frozen=True)
class RecordFilters:
    """Optional list filters. Text filters match case-insensitively."""

    city: str | None = None
    category: str | None = None
    engagement_tier: str | None = None
    status: str | None = None
    followers_min: int | None = None
    followers_max: int | None = None


def _clean_fields(payload: dict[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, value in payload.items():
        if key not in PROFILE_FIELDS:
            continue
        if key in _DATE_FIELDS:
            value = parse_date(value)
        elif key == "email" and isinstance(value, str):
            value = normalize_email(value) or None
        data[key] = value
    return data


def list_records(
    db: Session,
    record_type: RecordType,
    filters: RecordFilters | None = None,
) -> list[PersonRecord]:
    """Records of one type, ordered by record_id."""
    query = db.query(PersonRecord).filter(PersonRecord.record_type == record_type.value)
    if filters is not None:
        text_filters = (
            (PersonRecord.city, filters.city),
            (PersonRecord.influencer_category, filters.category),
            (PersonRecord.engagement_rate_tier, filters.engagement_tier),
            (PersonRecord.collaboration_status, filters.status),
        )
        for column, value in text_filters:
            if value:
                query = query.filter(func.lower(column) == value.strip().lower())

        if filters.followers_min is not None or filters.followers_max is not None:
            # A record matches when either its primary or its total follower count is in range.
            ranges = []
            for column in (PersonRecord.followers_count, PersonRecord.total_followers_count):
                conditions = []
                if filters.followers_min is not None:
                    conditions.append(column >= filters.followers_min)
                if filters.followers_max is not None:
                    conditions.append(column <= filters.followers_max)
                ranges.append(and_(*conditions))
            query = query.filter(or_(*ranges))

    return query.order_by(PersonRecord.record_id.asc()).all()


def get_record(db: Session, record_type: RecordType, record_id: str) -> PersonRecord | None:
    """Return the record, or None when missing or of a different type."""
    row = get_record_any_type(db, record_id)
    if row is None or row.record_type != record_type.value:
        return None
    return row


def get_record_any_type(db: Session, record_id: str) -> PersonRecord | None:
    return db.query(PersonRecord).filter(PersonRecord.record_id == record_id).first()


def generate_sequential_id(db: Session, record_type: RecordType) -> str:
    """Next id for the type, keeping the digit width of the latest id (minimum 3)."""
    prefix = record_type.prefix
    latest = (
        db.query(PersonRecord.record_id)
        .filter(
            PersonRecord.record_type == record_type.value,
            PersonRecord.record_id.startswith(f"{prefix}-"),
        )
        .order_by(PersonRecord.record_id.desc())
        .first()
    )
    parsed = parse_sequential_id(latest[0] if latest else None, prefix)
    number, width = parsed if parsed else (0, 3)
    return f"{prefix}-{str(number + 1).zfill(width)}"


def create_record(
    db: Session,
    record_type: RecordType,
    payload: dict[str, Any],
    record_id: str | None = None,
    role: Role | None = None,
    commit: bool = True,
) -> PersonRecord:
    """
    Insert a record; generates the next sequential id when record_id is not given.

    With commit=False the row is only flushed, so a caller attaching a login
    can commit both in one transaction (or roll both back).
    """
    data = _clean_fields(payload)
    data["full_name"] = data.get("full_name") or "Unnamed"
    if role is not None:
        data["role"] = role.value
    row = PersonRecord(
        record_id=record_id or generate_sequential_id(db, record_type),
        record_type=record_type.value,
        **data,
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    else:
        db.flush()
    logger.info(
        "Person record created",
        extra={"record_id": row.record_id, "record_type": row.record_type, "committed": commit},
    )
    return row


def update_record(
    db: Session,
    record_type: RecordType,
    record_id: str,
    payload: dict[str, Any],
    role: Role | None = None,
) -> PersonRecord | None:
    """Apply only the supplied fields. Returns None when the record is missing or of another type."""
    row = get_record(db, record_type, record_id)
    if row is None:
        return None
    data = _clean_fields(payload)
    if role is not None:
        data["role"] = role.value
    if not data:
        return row
    for key, value in data.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def delete_record(db: Session, record_type: RecordType, record_id: str) -> bool:
    """Hard delete. Returns False when there was nothing to delete."""
    row = get_record(db, record_type, record_id)
    if row is None:
        return False
    db.delete(row)
    db.commit()
    logger.info(
        "Person record deleted",
        extra={"record_id": record_id, "record_type": record_type.value},
    )
    return True


def list_distinct_values(
    db: Session,
    field: DistinctField,
    record_type: RecordType | None = None,
) -> list[str]:
    """Distinct non-empty values of a filterable column, trimmed and sorted."""
    if field not in DISTINCT_FIELDS:
        raise ValueError(f"Unsupported distinct field: {field!r}")
    column = getattr(PersonRecord, field)
    query = db.query(column).distinct()
    if record_type is not None:
        query = query.filter(PersonRecord.record_type == record_type.value)
    values = {
        value.strip()
        for (value,) in query.all()
        if isinstance(value, str) and value.strip()
    }
    return sorted(values)

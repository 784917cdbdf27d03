"""Record id handling and derived influencer metrics (follower totals, engagement rate and tier)."""

import re
from datetime import date

from app.models.enums import RecordType

# Engagement tier thresholds on the (total followers / monthly reach) / 4 ratio.
ENGAGEMENT_HIGH_ABOVE = 0.07
ENGAGEMENT_MEDIUM_FROM = 0.05

MIN_ID_DIGITS = 3

_PREFIX_TO_TYPE: dict[str, RecordType] = {
    "IND": RecordType.INDIVIDUAL,
    "INF": RecordType.INFLUENCER,
}


def parse_record_type(value: str | None) -> RecordType | None:
    """Case-insensitive 'individual' / 'influencer'; None for anything else."""
    if not value or not isinstance(value, str):
        return None
    try:
        return RecordType(value.strip().lower())
    except ValueError:
        return None


def infer_record_type_from_id(value: str | None) -> RecordType | None:
    """Record type from an id prefix (IND... or INF...), or None."""
    if not value:
        return None
    upper = value.strip().upper()
    for prefix, record_type in _PREFIX_TO_TYPE.items():
        if upper.startswith(prefix):
            return record_type
    return None


def normalize_record_id(raw_id: str, fallback_type: RecordType) -> str:
    """
    Canonical 'PREFIX-NNN' form of a user-supplied id.

    '5' -> 'INF-005' (with fallback influencer), 'ind_12' -> 'IND-012',
    'INF-1234' stays 'INF-1234'. An id without digits becomes 'PREFIX-000'.
    """
    trimmed = raw_id.strip().upper()
    explicit = infer_record_type_from_id(trimmed)
    record_type = explicit or fallback_type
    prefix = record_type.prefix

    if explicit is not None:
        remainder = re.sub(rf"^{prefix}[-_]?", "", trimmed)
    else:
        remainder = trimmed
    digits = re.sub(r"\D", "", remainder)
    if not digits:
        return f"{prefix}-{'0' * MIN_ID_DIGITS}"
    return f"{prefix}-{digits.zfill(MIN_ID_DIGITS)}"


def parse_sequential_id(record_id: str | None, prefix: str) -> tuple[int, int] | None:
    """(number, digit width) for ids like 'IND-007'; None when the id does not match."""
    if not record_id or not record_id.startswith(f"{prefix}-"):
        return None
    numeric = record_id[len(prefix) + 1:]
    if not numeric.isdigit():
        return None
    return int(numeric), len(numeric)


def total_followers(
    followers_count: int | None,
    secondary_followers_count: int | None,
    submitted_total: int | None = None,
) -> int | None:
    """Primary + secondary when both are known; otherwise whatever total was submitted."""
    if followers_count is not None and secondary_followers_count is not None:
        return followers_count + secondary_followers_count
    return submitted_total


def engagement_rate(total: int | float | None, average_monthly_reach: int | float | None) -> float | None:
    if total is None or average_monthly_reach is None or average_monthly_reach <= 0:
        return None
    return (total / average_monthly_reach) / 4


def engagement_tier(rate: float | None) -> str | None:
    if rate is None:
        return None
    if rate > ENGAGEMENT_HIGH_ABOVE:
        return "high"
    if rate >= ENGAGEMENT_MEDIUM_FROM:
        return "medium"
    if rate >= 0:
        return "low"
    return None


def parse_date(value: str | date | None) -> date | None:
    """ISO 'YYYY-MM-DD' (longer ISO timestamps are cut to the date); invalid input -> None."""
    if value is None or isinstance(value, date):
        return value
    text = value.strip()[:10]
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def with_derived_metrics(fields: dict, prefer_computed: bool = True) -> dict:
    """
    Copy of fields with total_followers_count, engagement_rate and
    engagement_rate_tier filled in from the follower and reach counts.

    With prefer_computed=False, a submitted rate or tier wins over the computed one.
    """
    data = dict(fields)
    total = total_followers(
        data.get("followers_count"),
        data.get("secondary_followers_count"),
        data.get("total_followers_count"),
    )
    if total is not None:
        data["total_followers_count"] = total

    rate = data.get("engagement_rate")
    computed = engagement_rate(total, data.get("average_monthly_reach"))
    if computed is not None and (prefer_computed or rate is None):
        rate = computed
    if rate is not None:
        data["engagement_rate"] = rate

    if prefer_computed or not data.get("engagement_rate_tier"):
        tier = engagement_tier(rate)
        if tier is not None:
            data["engagement_rate_tier"] = tier
    return data

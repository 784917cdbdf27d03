"""Query-string helpers shared by the record routers (snake_case or camelCase parameter names)."""

from collections.abc import Mapping

from app.models.enums import RecordType
from app.services.record_store import RecordFilters


def first_param(params: Mapping[str, str], *names: str) -> str | None:
    """Value of the first non-empty parameter among names."""
    for name in names:
        value = params.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def parse_number(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


def build_filters(record_type: RecordType, params: Mapping[str, str]) -> RecordFilters:
    """
    Filters for a record listing. Influencers filter by category, engagement
    tier and collaboration status; individuals by status and follower range.
    Both filter by city.
    """
    city = first_param(params, "city")
    if record_type is RecordType.INFLUENCER:
        return RecordFilters(
            city=city,
            category=first_param(params, "influencer_category", "influencerCategory"),
            engagement_tier=first_param(params, "engagement_rate_tier", "engagementRateTier"),
            status=first_param(params, "collaboration_status", "collaborationStatus"),
        )
    return RecordFilters(
        city=city,
        status=first_param(params, "status"),
        followers_min=parse_number(first_param(params, "followers_min", "followersMin")),
        followers_max=parse_number(first_param(params, "followers_max", "followersMax")),
    )

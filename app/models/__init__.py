"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.enums import RecordType, Role
from app.models.person import PersonRecord

__all__ = ["Base", "PersonRecord", "RecordType", "Role"]

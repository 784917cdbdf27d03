"""Enumerations shared by ORM models, schemas and services."""

import enum


class Role(str, enum.Enum):
    """Account role. Declaration order is privilege order, highest first."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"

    @property
    def level(self) -> int:
        return _ROLE_LEVELS[self]

    @classmethod
    def parse(cls, value: object) -> "Role | None":
        """Return the role for a case-insensitive string, or None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_ROLE_LEVELS = {
    Role.SUPERADMIN: 100,
    Role.ADMIN: 80,
    Role.EDITOR: 60,
    Role.USER: 20,
}

ROLE_VALUES: tuple[str, ...] = tuple(r.value for r in Role)


class RecordType(str, enum.Enum):
    """Kind of person record; determines the id prefix."""

    INDIVIDUAL = "individual"
    INFLUENCER = "influencer"

    @property
    def prefix(self) -> str:
        return "IND" if self is RecordType.INDIVIDUAL else "INF"

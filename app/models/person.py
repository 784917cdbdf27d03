"""ORM model for person records (individuals and influencers) and their login columns."""

from sqlalchemy import Column, Date, DateTime, Index, Integer, Numeric, String, Text, func, text

from app.models.base import Base
from app.models.enums import Role


class PersonRecord(Base):
    """
    One row per person in the directory.

    A row becomes a login-capable account when ``email`` and ``password_hash``
    are set; clearing ``password_hash`` disables the login but keeps the profile.
    record_id: 'IND-001' for individuals, 'INF-001' for influencers.
    """

    __tablename__ = "people"

    record_id = Column(String(32), primary_key=True)
    record_type = Column(String(32), nullable=False, index=True)
    full_name = Column(String(255), nullable=False, default="")
    preferred_name = Column(String(255), nullable=True)
    gender = Column(String(32), nullable=True)
    birth_date = Column(Date, nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(64), nullable=True)
    city = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    occupation = Column(String(255), nullable=True)
    influencer_category = Column(String(255), nullable=True)
    primary_platform = Column(String(255), nullable=True)
    followers_count = Column(Integer, nullable=True)
    total_followers_count = Column(Integer, nullable=True)
    engagement_rate = Column(Numeric(10, 4, asdecimal=False), nullable=True)
    engagement_rate_tier = Column(String(32), nullable=True)
    interests = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    secondary_platform = Column(String(255), nullable=True)
    secondary_followers_count = Column(Integer, nullable=True)
    average_monthly_reach = Column(Integer, nullable=True)
    collaboration_status = Column(String(64), nullable=True)
    languages = Column(String(255), nullable=True)
    portfolio_url = Column(String(2048), nullable=True)
    last_contact_date = Column(Date, nullable=True)

    password_hash = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=Role.USER.value, server_default=Role.USER.value)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# One live account per case-insensitive email; profile-only rows may share an address.
Index(
    "uq_people_account_email",
    func.lower(PersonRecord.email),
    unique=True,
    postgresql_where=text("password_hash IS NOT NULL"),
    sqlite_where=text("password_hash IS NOT NULL"),
)

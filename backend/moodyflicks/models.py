"""
MoodyFlicks - SQLAlchemy Models
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, JSON, Index
from moodyflicks.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StateSlot(Base):
    """One named piece of client state (points, watched list, collections...) per profile."""
    __tablename__ = "state_slots"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(String(64), nullable=False)
    slot = Column(String(100), nullable=False)
    value = Column(JSON)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_state_slots_profile_slot", "profile_id", "slot", unique=True),
    )

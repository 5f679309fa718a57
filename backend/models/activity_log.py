from sqlalchemy import Column, Integer, String, Text, DateTime
from database import Base
from models.audit_mixin import local_now


class ActivityLog(Base):
    """Append-only audit trail of user actions."""
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String, nullable=False) # e.g., "Inventory Item Added"
    details = Column(Text, nullable=True)
    user_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=local_now, index=True)

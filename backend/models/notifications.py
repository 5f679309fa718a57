from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum
from database import Base
import enum
from models.audit_mixin import local_now


class NotificationType(str, enum.Enum):
    INVENTORY_ALERT = "inventory_alert"
    APPOINTMENT_REMINDER = "appointment_reminder"
    FOLLOW_UP = "follow_up"
    USER_REQUEST = "user_request"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(NotificationType), nullable=False)
    message = Column(Text, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=local_now)

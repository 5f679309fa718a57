from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from models.notifications import NotificationType


class NotificationCreate(BaseModel):
    type: NotificationType
    message: str
    user_id: str

class Notification(NotificationCreate):
    id: int
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UnreadCount(BaseModel):
    unread: int

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from schemas.notifications import Notification, UnreadCount
from crud import notifications as crud_notifications
from utils.auth_utils import get_current_user, get_user_identifier

router = APIRouter(prefix="/notifications", tags=["Notifications"])
logger = logging.getLogger("notifications")


@router.get("/", response_model=List[Notification])
def read_notifications(
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """Bell notifications for the signed-in user, newest first."""
    return crud_notifications.get_user_notifications(
        db, user_id=get_user_identifier(user), unread_only=unread_only, skip=skip, limit=limit
    )


@router.get("/unread-count", response_model=UnreadCount)
def read_unread_count(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return UnreadCount(unread=crud_notifications.count_unread(db, get_user_identifier(user)))


@router.patch("/{notification_id}/read", response_model=Notification)
def mark_notification_read(notification_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_notification = crud_notifications.mark_as_read(db, notification_id, get_user_identifier(user))
    if db_notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return db_notification


@router.post("/read-all")
def mark_all_notifications_read(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    user_id = get_user_identifier(user)
    updated = crud_notifications.mark_all_as_read(db, user_id)
    logger.info(f"Marked {updated} notification(s) as read for user {user_id}")
    return {"message": "All notifications marked as read", "updated": updated}


@router.delete("/{notification_id}")
def delete_notification(notification_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    if not crud_notifications.delete_notification(db, notification_id, get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification deleted"}


@router.delete("/")
def clear_notifications(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    user_id = get_user_identifier(user)
    deleted = crud_notifications.delete_all_notifications(db, user_id)
    logger.info(f"Cleared {deleted} notification(s) for user {user_id}")
    return {"message": "All notifications cleared", "deleted": deleted}

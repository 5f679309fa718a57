from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.notifications import Notification
from schemas.notifications import NotificationCreate


def create_notification(db: Session, notification: NotificationCreate):
    db_notification = Notification(**notification.model_dump())
    try:
        db.add(db_notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_notification)
    return db_notification


def get_user_notifications(db: Session, user_id: str, unread_only: bool = False, skip: int = 0, limit: int = 50):
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).offset(skip).limit(limit).all()


def count_unread(db: Session, user_id: str) -> int:
    return db.query(Notification).filter(Notification.user_id == user_id, Notification.is_read.is_(False)).count()


def get_notification(db: Session, notification_id: int, user_id: str):
    return db.query(Notification).filter(Notification.id == notification_id, Notification.user_id == user_id).first()


def mark_as_read(db: Session, notification_id: int, user_id: str):
    db_notification = get_notification(db, notification_id, user_id)
    if not db_notification:
        return None
    db_notification.is_read = True
    db.commit()
    db.refresh(db_notification)
    return db_notification


def mark_all_as_read(db: Session, user_id: str) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id, Notification.is_read.is_(False)
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return updated


def delete_notification(db: Session, notification_id: int, user_id: str) -> bool:
    db_notification = get_notification(db, notification_id, user_id)
    if not db_notification:
        return False
    db.delete(db_notification)
    db.commit()
    return True


def delete_all_notifications(db: Session, user_id: str) -> int:
    deleted = db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return deleted

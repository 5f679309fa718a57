import logging
from typing import Optional
from datetime import date, datetime, time
from sqlalchemy.exc import SQLAlchemyError
import pytz
from sqlalchemy.orm import Session
from config import APP_TIMEZONE
from models.activity_log import ActivityLog

logger = logging.getLogger("activity_log")


def log_activity(db: Session, action: str, details: Optional[str] = None, user_id: Optional[str] = None):
    """
    Append an entry to the activity log.

    Logging is best-effort: a failure is reported and rolled back but never
    interrupts the operation that triggered it.
    """
    try:
        entry = ActivityLog(action=action, details=details, user_id=user_id)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error logging activity '{action}': {e}")
        return None


def get_activity_logs(db: Session, search: Optional[str] = None, skip: int = 0, limit: int = 100):
    query = db.query(ActivityLog)
    if search:
        query = query.filter(ActivityLog.details.ilike(f"%{search}%"))
    return query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).offset(skip).limit(limit).all()


def get_activity_logs_between(db: Session, start_date: date, end_date: date):
    """Entries from the start of start_date to the end of end_date, barangay local time."""
    tz = pytz.timezone(APP_TIMEZONE)
    return db.query(ActivityLog).filter(
        ActivityLog.created_at >= tz.localize(datetime.combine(start_date, time.min)),
        ActivityLog.created_at <= tz.localize(datetime.combine(end_date, time.max)),
    ).order_by(ActivityLog.created_at).all()

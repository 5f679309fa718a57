from sqlalchemy import Boolean, Column, DateTime, String
from datetime import datetime
import pytz

from config import APP_TIMEZONE


def local_now():
    return datetime.now(pytz.timezone(APP_TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Timestamps are timezone-aware and stored in the barangay's local timezone.
    """
    created_at = Column(DateTime(timezone=True), default=local_now)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for soft-delete columns (is_deleted, deleted_at, deleted_by).

    Rows carrying this mixin are hidden from ordinary SELECTs by the listener in
    database.py and only disappear for good through a recycle-bin purge.
    """
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)

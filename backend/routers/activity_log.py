from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models.profiles import Profile
from schemas.activity_log import ActivityLog
from crud import activity_log as crud_activity_log
from utils.auth_utils import require_roles

router = APIRouter(prefix="/activity-logs", tags=["Activity Log"])


@router.get("/", response_model=List[ActivityLog])
def read_activity_logs(
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Admin", "Midwife"])),
):
    return crud_activity_log.get_activity_logs(db, search=search, skip=skip, limit=limit)

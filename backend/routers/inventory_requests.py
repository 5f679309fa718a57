from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from models.inventory_items import OwnerRole
from models.inventory_requests import RequestStatus
from models.profiles import Profile
from schemas.inventory_requests import InventoryRequest, InventoryRequestCreate
from crud import inventory_items as crud_inventory_items
from crud import inventory_requests as crud_requests
from routers.inventory_items import get_staff_profile
from utils.auth_utils import get_current_profile, require_roles

router = APIRouter(prefix="/requests", tags=["Requests"])
logger = logging.getLogger("inventory_requests")


@router.post("/inventory/{owner_role}/{item_id}", response_model=InventoryRequest, status_code=status.HTTP_201_CREATED)
def submit_request(
    owner_role: OwnerRole,
    item_id: int,
    request: InventoryRequestCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_staff_profile),
):
    """Ask an Admin to update or delete an inventory item."""
    db_item = crud_inventory_items.get_inventory_item(db, item_id=item_id, owner_role=owner_role)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")

    db_request = crud_requests.create_request(db, db_item, request, worker_id=profile.id)
    logger.info(f"{request.request_type.value} request {db_request.id} for '{db_item.item_name}' submitted by user {profile.id}")
    return db_request


@router.get("/mine", response_model=List[InventoryRequest])
def read_my_requests(db: Session = Depends(get_db), profile: Profile = Depends(get_current_profile)):
    return crud_requests.get_worker_requests(db, profile.id)


@router.get("/", response_model=List[InventoryRequest])
def read_requests(
    owner_role: Optional[OwnerRole] = None,
    request_status: Optional[str] = Query("Pending", alias="status"),
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Admin"])),
):
    """Requests awaiting review, newest first. Pass status=All to see every request."""
    if request_status in (None, "All"):
        status_filter = None
    else:
        try:
            status_filter = RequestStatus(request_status)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown request status '{request_status}'")
    return crud_requests.get_requests(db, owner_role=owner_role, status=status_filter)


def _get_pending_or_error(db: Session, request_id: int):
    db_request = crud_requests.get_request(db, request_id)
    if db_request is None:
        raise HTTPException(status_code=404, detail="Request not found")
    if db_request.status != RequestStatus.PENDING:
        raise HTTPException(status_code=409, detail=f"Request has already been {db_request.status.value.lower()}")
    return db_request


@router.post("/{request_id}/approve", response_model=InventoryRequest)
def approve_request(request_id: int, db: Session = Depends(get_db), profile: Profile = Depends(require_roles(["Admin"]))):
    db_request = _get_pending_or_error(db, request_id)
    try:
        approved = crud_requests.approve_request(db, db_request, reviewer_id=profile.id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if approved is None:
        raise HTTPException(status_code=404, detail="The requested inventory item no longer exists")
    logger.info(f"Request {request_id} approved by user {profile.id}")
    return approved


@router.post("/{request_id}/deny", response_model=InventoryRequest)
def deny_request(request_id: int, db: Session = Depends(get_db), profile: Profile = Depends(require_roles(["Admin"]))):
    db_request = _get_pending_or_error(db, request_id)
    denied = crud_requests.deny_request(db, db_request, reviewer_id=profile.id)
    logger.info(f"Request {request_id} denied by user {profile.id}")
    return denied

import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.audit_mixin import local_now
from models.inventory_items import InventoryItem, OwnerRole
from models.inventory_requests import InventoryRequest, RequestStatus, RequestType
from models.notifications import NotificationType
from schemas.inventory_items import InventoryItemUpdate
from schemas.inventory_requests import InventoryRequestCreate
from schemas.notifications import NotificationCreate
from crud.activity_log import log_activity
from crud import inventory_items as crud_inventory_items
from crud import notifications as crud_notifications

logger = logging.getLogger("inventory_requests")


def create_request(db: Session, db_item: InventoryItem, request: InventoryRequestCreate, worker_id: str):
    if request.request_type == RequestType.UPDATE:
        request_data = request.changes.model_dump(mode="json", exclude_unset=True)
    else:
        request_data = {"item_name": db_item.item_name, "quantity": db_item.quantity, "category": db_item.category}

    db_request = InventoryRequest(
        worker_id=worker_id,
        request_type=request.request_type,
        owner_role=db_item.owner_role,
        target_record_id=db_item.id,
        request_data=request_data,
        status=RequestStatus.PENDING,
    )
    try:
        db.add(db_request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_request)
    log_activity(
        db,
        f"{db_item.owner_role.value} Inventory {request.request_type.value} Request",
        f"Submitted request for {db_item.item_name}",
        worker_id,
    )
    return db_request


def get_requests(db: Session, owner_role: Optional[OwnerRole] = None, status: Optional[RequestStatus] = None):
    query = db.query(InventoryRequest)
    if owner_role:
        query = query.filter(InventoryRequest.owner_role == owner_role)
    if status:
        query = query.filter(InventoryRequest.status == status)
    return query.order_by(InventoryRequest.created_at.desc(), InventoryRequest.id.desc()).all()


def get_worker_requests(db: Session, worker_id: str):
    return db.query(InventoryRequest).filter(InventoryRequest.worker_id == worker_id).order_by(
        InventoryRequest.created_at.desc(), InventoryRequest.id.desc()
    ).all()


def get_request(db: Session, request_id: int):
    return db.query(InventoryRequest).filter(InventoryRequest.id == request_id).first()


def _close_request(db: Session, db_request: InventoryRequest, status: RequestStatus, reviewer_id: str):
    db_request.status = status
    db_request.reviewed_by = reviewer_id
    db_request.reviewed_at = local_now()
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_request)


def _notify_worker(db: Session, db_request: InventoryRequest, message: str):
    try:
        crud_notifications.create_notification(
            db, NotificationCreate(type=NotificationType.USER_REQUEST, message=message, user_id=db_request.worker_id)
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to notify worker {db_request.worker_id} about request {db_request.id}: {e}")


def _item_name(db: Session, db_request: InventoryRequest) -> str:
    db_item = crud_inventory_items.get_inventory_item(db, db_request.target_record_id, db_request.owner_role)
    if db_item is not None:
        return db_item.item_name
    return (db_request.request_data or {}).get("item_name") or f"record ID {db_request.target_record_id}"


def approve_request(db: Session, db_request: InventoryRequest, reviewer_id: str):
    """
    Carry out a pending request and mark it Approved.

    Returns None when the target row no longer exists; the request then stays Pending.
    Raises ValueError when an Update would rename the row onto an existing name.
    """
    owner_role = db_request.owner_role
    db_item = crud_inventory_items.get_inventory_item(db, db_request.target_record_id, owner_role)
    if db_item is None:
        return None

    item_name = db_item.item_name
    if db_request.request_type == RequestType.UPDATE:
        changes = InventoryItemUpdate(**(db_request.request_data or {}))
        if changes.item_name is not None and changes.item_name != item_name:
            if crud_inventory_items.get_inventory_item_by_name(db, changes.item_name, owner_role):
                raise ValueError("Inventory item with this name already exists")
        crud_inventory_items.update_inventory_item(db, db_item.id, changes, owner_role, user_id=reviewer_id)
    else:
        crud_inventory_items.soft_delete_inventory_item(db, db_item.id, owner_role, user_id=reviewer_id)

    _close_request(db, db_request, RequestStatus.APPROVED, reviewer_id)
    log_activity(db, "Request Approved", f"{db_request.request_type.value} request for {item_name} was approved by an Admin.", reviewer_id)
    _notify_worker(db, db_request, f"Your {db_request.request_type.value} request for {item_name} was approved.")
    return db_request


def deny_request(db: Session, db_request: InventoryRequest, reviewer_id: str):
    _close_request(db, db_request, RequestStatus.DENIED, reviewer_id)
    item_name = _item_name(db, db_request)
    log_activity(db, "Request Denied", f"Denied {db_request.request_type.value} for {item_name} (record ID {db_request.target_record_id})", reviewer_id)
    _notify_worker(db, db_request, f"Your {db_request.request_type.value} request for {item_name} was denied.")
    return db_request

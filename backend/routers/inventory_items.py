from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from config import DEFAULT_PAGE_SIZE
from database import get_db
from models.inventory_items import OwnerRole
from models.profiles import Profile, UserRole
from schemas.activity_log import ActivityLog
from schemas.inventory_items import InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryPage, StockMovement
from crud import activity_log as crud_activity_log
from crud import app_config as crud_app_config
from crud import inventory_items as crud_inventory_items
from routers.toasts import get_toast_bus
from services.stock_alerts import load_rows, run_reconciliation_pass
from services.stock_store import SqlStockStore
from services.toast_bus import ToastBus
from utils import page_links, total_pages
from utils.auth_utils import get_current_profile, get_optional_user, get_user_identifier, require_roles

router = APIRouter(prefix="/inventory", tags=["Inventory"])
logger = logging.getLogger("inventory")

# Who may change each program's stock
STAFF_ROLES = {
    OwnerRole.BHW: {UserRole.BHW, UserRole.ADMIN, UserRole.MIDWIFE},
    OwnerRole.BNS: {UserRole.BNS, UserRole.ADMIN, UserRole.MIDWIFE},
}


def get_staff_profile(owner_role: OwnerRole, profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role not in STAFF_ROLES[owner_role]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{profile.role.value} accounts cannot manage the {owner_role.value} inventory",
        )
    return profile


def _get_item_or_404(db: Session, item_id: int, owner_role: OwnerRole):
    db_item = crud_inventory_items.get_inventory_item(db, item_id=item_id, owner_role=owner_role)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return db_item


@router.get("/{owner_role}", response_model=InventoryPage)
async def read_inventory_items(
    owner_role: OwnerRole,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user: Optional[dict] = Depends(get_optional_user),
    toast_bus: ToastBus = Depends(get_toast_bus),
):
    """
    Retrieve one page of a program's inventory.

    Every fetch reconciles the stored stock status of the returned rows,
    persists any corrections and raises low-stock alerts for rows that just
    degraded. Rows whose correction could not be saved come back with
    synced=false.
    """
    if category == "All":
        category = None

    try:
        items, total = crud_inventory_items.get_inventory_page(
            db,
            owner_role=owner_role,
            skip=(page - 1) * page_size,
            limit=page_size,
            category=category,
            search=search,
        )
        pipeline_config = crud_app_config.get_pipeline_config(db, owner_role)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error fetching {owner_role.value} inventory: {e}")
        if not toast_bus.closed:
            toast_bus.publish("Error fetching inventory. Please try again.", type="error")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Inventory is temporarily unavailable")

    rows = load_rows(items)
    result = await run_reconciliation_pass(
        rows,
        pipeline_config,
        SqlStockStore(db),
        toast_bus=toast_bus,
        user_id=get_user_identifier(user),
    )

    pages = total_pages(total, page_size)
    return InventoryPage(
        items=result.rows,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=pages,
        page_links=page_links(page, pages),
        alerts=result.alerts,
    )


@router.post("/{owner_role}", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    owner_role: OwnerRole,
    item: InventoryItemCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_staff_profile),
):
    """Create a new inventory item. Its status is settled on the next fetch."""
    if crud_inventory_items.get_inventory_item_by_name(db, item.item_name, owner_role):
        raise HTTPException(status_code=409, detail="Inventory item with this name already exists")

    new_item = crud_inventory_items.create_inventory_item(db=db, item=item, owner_role=owner_role, user_id=profile.id)
    logger.info(f"Inventory item '{new_item.item_name}' created by user {profile.id} in {owner_role.value}")
    return new_item


@router.get("/{owner_role}/{item_id}", response_model=InventoryItem)
def read_inventory_item(owner_role: OwnerRole, item_id: int, db: Session = Depends(get_db)):
    """Retrieve a single inventory item by ID."""
    return _get_item_or_404(db, item_id, owner_role)


@router.get("/{owner_role}/{item_id}/history", response_model=List[ActivityLog])
def read_inventory_item_history(owner_role: OwnerRole, item_id: int, db: Session = Depends(get_db)):
    """Issuances, refills and edits recorded for this item, newest first."""
    db_item = _get_item_or_404(db, item_id, owner_role)
    return crud_activity_log.get_activity_logs(db, search=db_item.item_name)


@router.patch("/{owner_role}/{item_id}", response_model=InventoryItem)
def update_inventory_item(
    owner_role: OwnerRole,
    item_id: int,
    item: InventoryItemUpdate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_staff_profile),
):
    """Update an existing inventory item."""
    db_item = _get_item_or_404(db, item_id, owner_role)

    # Check if name is being updated to an existing name
    if item.item_name is not None and item.item_name != db_item.item_name:
        if crud_inventory_items.get_inventory_item_by_name(db, item.item_name, owner_role):
            raise HTTPException(status_code=409, detail="Inventory item with this name already exists")

    updated_item = crud_inventory_items.update_inventory_item(db=db, item_id=item_id, item=item, owner_role=owner_role, user_id=profile.id)
    logger.info(f"Inventory item '{updated_item.item_name}' (ID: {item_id}) updated by user {profile.id}")
    return updated_item


@router.post("/{owner_role}/{item_id}/issue", response_model=InventoryItem)
def issue_inventory_item(
    owner_role: OwnerRole,
    item_id: int,
    movement: StockMovement,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_staff_profile),
):
    """Issue units of an item, lowering its stock."""
    db_item = _get_item_or_404(db, item_id, owner_role)
    try:
        db_item = crud_inventory_items.adjust_quantity(
            db, db_item, -movement.quantity, f"{owner_role.value} Item Issued", user_id=profile.id, remarks=movement.remarks
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"{movement.quantity} unit(s) of '{db_item.item_name}' issued by user {profile.id}")
    return db_item


@router.post("/{owner_role}/{item_id}/refill", response_model=InventoryItem)
def refill_inventory_item(
    owner_role: OwnerRole,
    item_id: int,
    movement: StockMovement,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Midwife", "Admin"])),
):
    """Add received units to an item's stock."""
    db_item = _get_item_or_404(db, item_id, owner_role)
    db_item = crud_inventory_items.adjust_quantity(
        db, db_item, movement.quantity, "Inventory Refilled", user_id=profile.id, remarks=movement.remarks
    )
    logger.info(f"'{db_item.item_name}' refilled with {movement.quantity} unit(s) by user {profile.id}")
    return db_item


@router.delete("/{owner_role}/{item_id}")
def delete_inventory_item(
    owner_role: OwnerRole,
    item_id: int,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Admin"])),
):
    """
    Move an inventory item to the recycle bin.

    Admin only. BHW and BNS staff submit a Delete request under /requests instead.
    """
    db_item = crud_inventory_items.soft_delete_inventory_item(db=db, item_id=item_id, owner_role=owner_role, user_id=profile.id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    logger.info(f"Inventory item '{db_item.item_name}' (ID: {item_id}) moved to recycle bin by user {profile.id}")
    return {"message": "Inventory item moved to the recycle bin"}

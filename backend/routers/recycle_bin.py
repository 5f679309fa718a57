from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from models.inventory_items import OwnerRole
from models.profiles import Profile
from schemas.inventory_items import DeletedInventoryItem, InventoryItem
from crud import inventory_items as crud_inventory_items
from utils.auth_utils import require_roles
from utils.report_utils import SOURCE_LABELS

router = APIRouter(prefix="/recycle-bin", tags=["Recycle Bin"])
logger = logging.getLogger("recycle_bin")

ADMIN_ROLES = ["Admin", "Midwife"]


def _to_deleted_item(db_item) -> DeletedInventoryItem:
    item = InventoryItem.model_validate(db_item)
    return DeletedInventoryItem(
        **item.model_dump(),
        deleted_at=db_item.deleted_at,
        deleted_by=db_item.deleted_by,
        source_label=SOURCE_LABELS[db_item.owner_role],
    )


@router.get("/inventory", response_model=List[DeletedInventoryItem])
def read_deleted_inventory(
    owner_role: Optional[OwnerRole] = None,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(ADMIN_ROLES)),
):
    """Soft-deleted inventory rows from both programs, most recently deleted first."""
    return [_to_deleted_item(item) for item in crud_inventory_items.get_deleted_items(db, owner_role=owner_role)]


@router.post("/inventory/{item_id}/restore", response_model=InventoryItem)
def restore_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(ADMIN_ROLES)),
):
    db_item = crud_inventory_items.restore_inventory_item(db, item_id, user_id=profile.id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Deleted inventory item not found")
    logger.info(f"Inventory item '{db_item.item_name}' (ID: {item_id}) restored by user {profile.id}")
    return db_item


@router.delete("/inventory/{item_id}")
def purge_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Admin"])),
):
    """Permanently delete an item that is already in the recycle bin."""
    if not crud_inventory_items.purge_inventory_item(db, item_id, user_id=profile.id):
        raise HTTPException(status_code=404, detail="Deleted inventory item not found")
    logger.info(f"Inventory item {item_id} permanently deleted by user {profile.id}")
    return {"message": "Inventory item permanently deleted"}

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.audit_mixin import local_now
from models.inventory_items import InventoryItem, OwnerRole, StockStatus
from schemas.inventory_items import InventoryItemCreate, InventoryItemUpdate
from crud.activity_log import log_activity


def _filtered_query(db: Session, owner_role: Optional[OwnerRole] = None, category: Optional[str] = None, search: Optional[str] = None):
    query = db.query(InventoryItem).filter(InventoryItem.is_deleted.is_(False))
    if owner_role:
        query = query.filter(InventoryItem.owner_role == owner_role)
    if category:
        query = query.filter(InventoryItem.category == category)
    if search:
        query = query.filter(InventoryItem.item_name.ilike(f"%{search}%"))
    return query


def get_inventory_item(db: Session, item_id: int, owner_role: Optional[OwnerRole] = None):
    return _filtered_query(db, owner_role).filter(InventoryItem.id == item_id).first()


def get_inventory_item_by_name(db: Session, item_name: str, owner_role: OwnerRole):
    # Names are unique per role even across the recycle bin
    return db.query(InventoryItem).execution_options(include_deleted=True).filter(
        InventoryItem.item_name == item_name, InventoryItem.owner_role == owner_role
    ).first()


def get_inventory_page(db: Session, owner_role: OwnerRole, skip: int = 0, limit: int = 10, category: Optional[str] = None, search: Optional[str] = None):
    """Returns one page of non-deleted rows ordered by name, plus the total match count."""
    query = _filtered_query(db, owner_role, category, search)
    total = query.count()
    items = query.order_by(InventoryItem.item_name.asc(), InventoryItem.id.asc()).offset(skip).limit(limit).all()
    return items, total


def get_inventory_items(db: Session, owner_role: Optional[OwnerRole] = None, category: Optional[str] = None, search: Optional[str] = None):
    return _filtered_query(db, owner_role, category, search).order_by(InventoryItem.owner_role, InventoryItem.item_name).all()


def get_low_stock_items(db: Session):
    return _filtered_query(db).filter(
        InventoryItem.status.in_([StockStatus.LOW, StockStatus.CRITICAL])
    ).order_by(InventoryItem.owner_role, InventoryItem.item_name).all()


def get_items_by_ids(db: Session, item_ids: list[int]):
    return _filtered_query(db).filter(InventoryItem.id.in_(item_ids)).order_by(InventoryItem.item_name).all()


def create_inventory_item(db: Session, item: InventoryItemCreate, owner_role: OwnerRole, user_id: Optional[str] = None):
    db_item = InventoryItem(**item.model_dump(), owner_role=owner_role, created_by=user_id, updated_by=user_id)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    log_activity(
        db,
        "Inventory Item Added",
        f"Added new item: {db_item.item_name}, Category: {db_item.category}, Quantity: {db_item.quantity}",
        user_id,
    )
    return db_item


def update_inventory_item(db: Session, item_id: int, item: InventoryItemUpdate, owner_role: OwnerRole, user_id: Optional[str] = None):
    db_item = get_inventory_item(db, item_id, owner_role)
    if db_item:
        update_data = item.model_dump(exclude_unset=True)
        changed = []
        for key, value in update_data.items():
            if getattr(db_item, key) != value:
                changed.append(f"{key}: {getattr(db_item, key)} -> {value}")
            setattr(db_item, key, value)
        db_item.updated_by = user_id
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(db_item)
        log_activity(
            db,
            "Inventory Item Updated",
            f"Updated {db_item.item_name} ({owner_role.value}). " + ("; ".join(changed) if changed else "No changes."),
            user_id,
        )
    return db_item


def adjust_quantity(db: Session, db_item: InventoryItem, delta: int, action: str, user_id: Optional[str] = None, remarks: Optional[str] = None):
    """
    Apply an issuance (negative delta) or refill (positive delta).

    Raises ValueError when the result would go below zero. The status column is
    left alone; the next reconciliation pass brings it in line.
    """
    new_quantity = db_item.quantity + delta
    if new_quantity < 0:
        raise ValueError("Cannot issue more items than are in stock.")
    db_item.quantity = new_quantity
    db_item.updated_by = user_id
    db.commit()
    db.refresh(db_item)
    details = f"{abs(delta)} unit(s) of {db_item.item_name} {'issued' if delta < 0 else 'added'}. New stock: {new_quantity}."
    if remarks:
        details += f" Remarks: {remarks}"
    log_activity(db, action, details, user_id)
    return db_item


def update_item_status(db: Session, item_id: int, status: StockStatus) -> bool:
    """Status-only write used by the reconciliation pass. Last write wins."""
    try:
        updated = db.query(InventoryItem).filter(InventoryItem.id == item_id).update(
            {"status": status}, synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return updated > 0


def soft_delete_inventory_item(db: Session, item_id: int, owner_role: OwnerRole, user_id: Optional[str] = None):
    db_item = get_inventory_item(db, item_id, owner_role)
    if not db_item:
        return None
    db_item.is_deleted = True
    db_item.deleted_at = local_now()
    db_item.deleted_by = user_id
    db.commit()
    db.refresh(db_item)
    log_activity(db, "Inventory Item Deleted", f"Moved {db_item.item_name} ({owner_role.value}) to the recycle bin.", user_id)
    return db_item


def get_deleted_items(db: Session, owner_role: Optional[OwnerRole] = None):
    query = db.query(InventoryItem).execution_options(include_deleted=True).filter(InventoryItem.is_deleted.is_(True))
    if owner_role:
        query = query.filter(InventoryItem.owner_role == owner_role)
    return query.order_by(InventoryItem.deleted_at.desc(), InventoryItem.id.desc()).all()


def get_deleted_item(db: Session, item_id: int):
    return db.query(InventoryItem).execution_options(include_deleted=True).filter(
        InventoryItem.id == item_id, InventoryItem.is_deleted.is_(True)
    ).first()


def restore_inventory_item(db: Session, item_id: int, user_id: Optional[str] = None):
    db_item = get_deleted_item(db, item_id)
    if not db_item:
        return None
    db_item.is_deleted = False
    db_item.deleted_at = None
    db_item.deleted_by = None
    db_item.updated_by = user_id
    db.commit()
    db.refresh(db_item)
    log_activity(db, "Record Restored", f"Restored {db_item.item_name} from trash.", user_id)
    return db_item


def purge_inventory_item(db: Session, item_id: int, user_id: Optional[str] = None) -> bool:
    db_item = get_deleted_item(db, item_id)
    if not db_item:
        return False
    item_name = db_item.item_name
    try:
        db.delete(db_item)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    log_activity(db, "Record Permanently Deleted", f"Permanently deleted {item_name}.", user_id)
    return True

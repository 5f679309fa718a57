from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
from datetime import date, datetime
from models.inventory_items import OwnerRole, StockStatus


class InventoryItemBase(BaseModel):
    item_name: str = Field(..., min_length=1)
    category: Optional[str] = None
    quantity: int = Field(0, ge=0)
    unit: Optional[str] = None
    sku: Optional[str] = None
    batch_no: Optional[str] = None
    manufacture_date: Optional[date] = None
    expiry_date: Optional[date] = None
    supplier: Optional[str] = None
    supply_source: Optional[str] = None
    notes: Optional[str] = None

class InventoryItemCreate(InventoryItemBase):
    # status is system-managed and recomputed on the next fetch
    pass

class InventoryItemUpdate(BaseModel):
    item_name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = None
    sku: Optional[str] = None
    batch_no: Optional[str] = None
    manufacture_date: Optional[date] = None
    expiry_date: Optional[date] = None
    supplier: Optional[str] = None
    supply_source: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('item_name', 'quantity')
    @classmethod
    def reject_null(cls, v, info):
        # Leave the field out to keep its value; null would clear a required column
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

class StockMovement(BaseModel):
    """Quantity issued to a patient or received through a refill."""
    quantity: int = Field(..., ge=1)
    remarks: Optional[str] = None

class InventoryItem(InventoryItemBase):
    id: int
    owner_role: OwnerRole
    status: StockStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class InventoryRow(InventoryItem):
    """
    Render-scoped copy of an inventory row.

    `status` is what the caller should display and may be an optimistic value
    that has not reached the database yet. `confirmed_status` is the last
    status known to be persisted, and `synced` tells whether the two agree.
    """
    quantity: int
    confirmed_status: Optional[StockStatus] = None
    synced: bool = True

class StockAlert(BaseModel):
    item_id: int
    item_name: str
    status: StockStatus
    quantity: int
    message: str

class InventoryPage(BaseModel):
    items: List[InventoryRow]
    total: int
    page: int
    page_size: int
    total_pages: int
    page_links: List[Union[int, str]]
    alerts: List[StockAlert] = []

class DeletedInventoryItem(InventoryItem):
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
    source_label: str

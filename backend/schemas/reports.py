from pydantic import BaseModel, Field
from typing import List, Optional
from models.inventory_items import OwnerRole, StockStatus


class LowStockItem(BaseModel):
    id: int
    item_name: str
    category: Optional[str] = None
    quantity: int
    unit: Optional[str] = None
    status: StockStatus
    owner_role: OwnerRole
    source_label: str

class IssuanceSlipRequest(BaseModel):
    """Request and Issuance Slip (RIS) for replenishing low-stock items."""
    item_ids: List[int] = Field(..., min_length=1)
    requesting_entity: str = "Barangay Health Center"
    purpose: Optional[str] = None

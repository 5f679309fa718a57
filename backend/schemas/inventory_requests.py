from pydantic import BaseModel, model_validator
from typing import Any, Dict, Optional
from datetime import datetime
from models.inventory_items import OwnerRole
from models.inventory_requests import RequestStatus, RequestType
from schemas.inventory_items import InventoryItemUpdate


class InventoryRequestCreate(BaseModel):
    request_type: RequestType
    # Required for Update, ignored for Delete
    changes: Optional[InventoryItemUpdate] = None

    @model_validator(mode="after")
    def check_changes(self):
        if self.request_type == RequestType.UPDATE and (
            self.changes is None or not self.changes.model_dump(exclude_unset=True)
        ):
            raise ValueError("An Update request needs at least one field to change")
        return self

class InventoryRequest(BaseModel):
    id: int
    worker_id: str
    request_type: RequestType
    owner_role: OwnerRole
    target_record_id: int
    request_data: Optional[Dict[str, Any]] = None
    status: RequestStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON
from database import Base
import enum
from models.audit_mixin import local_now
from models.inventory_items import OwnerRole


class RequestType(str, enum.Enum):
    UPDATE = "Update"
    DELETE = "Delete"


class RequestStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


class InventoryRequest(Base):
    """A worker's request to change or remove an inventory row, pending Admin review."""
    __tablename__ = "inventory_requests"

    id = Column(Integer, primary_key=True, index=True)
    worker_id = Column(String, nullable=False, index=True)
    request_type = Column(Enum(RequestType), nullable=False)
    owner_role = Column(Enum(OwnerRole), nullable=False, index=True)
    target_record_id = Column(Integer, nullable=False)
    # Snapshot of the row for Delete, the proposed field changes for Update
    request_data = Column(JSON, nullable=True)
    status = Column(Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False, index=True)
    reviewed_by = Column(String, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=local_now)

    def __repr__(self):
        return f"<InventoryRequest(id={self.id}, type={self.request_type}, target={self.target_record_id}, status={self.status})>"

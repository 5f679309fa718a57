from sqlalchemy import Column, Integer, String, Text, Date, Enum, UniqueConstraint
from database import Base
import enum
from models.audit_mixin import TimestampMixin, SoftDeleteMixin


class StockStatus(str, enum.Enum):
    NORMAL = "Normal"
    LOW = "Low"
    CRITICAL = "Critical"


class OwnerRole(str, enum.Enum):
    BHW = "BHW"
    BNS = "BNS"


class InventoryItem(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "inventory_items"
    __table_args__ = (UniqueConstraint('item_name', 'owner_role', name='_inventory_items_name_role_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    owner_role = Column(Enum(OwnerRole), nullable=False, index=True)
    item_name = Column(String, nullable=False)
    category = Column(String, nullable=True) # e.g., "Medicine", "Vaccine", "Supplement"
    quantity = Column(Integer, default=0, nullable=False)
    unit = Column(String, nullable=True) # e.g., "tablets", "vials", "boxes"
    # Persisted status; may lag behind quantity until the next reconciliation pass
    status = Column(Enum(StockStatus), default=StockStatus.NORMAL, nullable=False)
    sku = Column(String, nullable=True)
    batch_no = Column(String, nullable=True)
    manufacture_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)
    supplier = Column(String, nullable=True)
    supply_source = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<InventoryItem(id={self.id}, item_name={self.item_name}, owner_role={self.owner_role}, quantity={self.quantity}, status={self.status})>"

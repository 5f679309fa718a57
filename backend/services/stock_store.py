from sqlalchemy.orm import Session

from crud import inventory_items as crud_inventory_items
from crud import notifications as crud_notifications
from models.inventory_items import StockStatus
from models.notifications import NotificationType
from schemas.notifications import NotificationCreate


class SqlStockStore:
    """Database side of a reconciliation pass, bound to one session."""

    def __init__(self, db: Session):
        self.db = db

    async def write_status(self, item_id: int, status: StockStatus) -> None:
        if not crud_inventory_items.update_item_status(self.db, item_id=item_id, status=status):
            raise LookupError(f"Inventory item {item_id} no longer exists")

    async def insert_notification(self, user_id: str, message: str) -> None:
        crud_notifications.create_notification(
            self.db,
            NotificationCreate(type=NotificationType.INVENTORY_ALERT, message=message, user_id=user_id),
        )

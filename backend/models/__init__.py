from models.inventory_items import InventoryItem, OwnerRole, StockStatus
from models.inventory_requests import InventoryRequest, RequestStatus, RequestType
from models.notifications import Notification, NotificationType
from models.activity_log import ActivityLog
from models.profiles import Profile, UserRole
from models.app_config import AppConfig

__all__ = ['ActivityLog', 'AppConfig', 'InventoryItem', 'InventoryRequest', 'Notification', 'NotificationType', 'OwnerRole', 'Profile', 'RequestStatus', 'RequestType', 'StockStatus', 'UserRole',]

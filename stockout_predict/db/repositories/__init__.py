from .config_repository import ConfigRepository
from .flag_repository import FlagRepository
from .notification_repository import NotificationRepository
from .sales_repository import SalesRepository
from .stock_repository import StockRepository

__all__ = [
    "ConfigRepository",
    "FlagRepository",
    "NotificationRepository",
    "SalesRepository",
    "StockRepository",
]

from .database import async_session_maker, engine, get_db, init_db
from .models import AdminNotification, ConfigValue, Flag, SalesOrderItem, StockItem

__all__ = [
    "get_db",
    "init_db",
    "engine",
    "async_session_maker",
    "AdminNotification",
    "ConfigValue",
    "Flag",
    "SalesOrderItem",
    "StockItem",
]

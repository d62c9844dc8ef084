"""Per-order prediction gate and low-stock notifications."""

from .cooldown import CooldownFlagStore, DatabaseCooldownStore
from .gate import GateOutcome, OrderLine, PlacedOrder, PredictionGate
from .notifications import (
    DatabaseNotificationSink,
    NotificationSink,
    notification_title,
)
from .stock import DatabaseStockLookup, StockLookup

__all__ = [
    "CooldownFlagStore",
    "DatabaseCooldownStore",
    "GateOutcome",
    "OrderLine",
    "PlacedOrder",
    "PredictionGate",
    "DatabaseNotificationSink",
    "NotificationSink",
    "notification_title",
    "DatabaseStockLookup",
    "StockLookup",
]

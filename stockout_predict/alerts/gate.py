"""Per-order prediction gate.

On every placed order each line is checked against its SKU's parameters. A
forecast is requested only when the SKU is tracked, no warning for it is still
open and the cooldown window has passed. A low-stock warning is raised when the
forecast falls below the SKU's alert threshold.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum

from stockout_predict.client import ForecastApiClient
from stockout_predict.config import settings
from stockout_predict.errors import TransportError
from stockout_predict.parameters import ParameterStore
from stockout_predict.parameters.fields import is_numeric
from .cooldown import CooldownFlagStore
from .notifications import NotificationSink
from .stock import StockLookup

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_HOURS = 3


@dataclass
class OrderLine:
    """One line of a placed order."""
    sku: str
    product_id: int | None = None
    stock_qty: Decimal | float | None = None  # already loaded with the product


@dataclass
class PlacedOrder:
    order_id: int | str | None
    lines: list[OrderLine] = field(default_factory=list)


class GateOutcome(str, Enum):
    """What the gate did for one order line."""
    NOT_TRACKED = "not_tracked"
    ALREADY_NOTIFIED = "already_notified"
    COOLDOWN = "cooldown"
    PREDICTION_FAILED = "prediction_failed"
    PREDICTED = "predicted"
    ALERTED = "alerted"
    ERROR = "error"


class PredictionGate:
    """Decides whether an order line warrants a forecast and an alert."""

    def __init__(
        self,
        store: ParameterStore,
        client: ForecastApiClient,
        notifications: NotificationSink,
        cooldowns: CooldownFlagStore,
        stock: StockLookup,
        cooldown_hours: int | None = None,
    ):
        self.store = store
        self.client = client
        self.notifications = notifications
        self.cooldowns = cooldowns
        self.stock = stock
        if cooldown_hours is None:
            cooldown_hours = settings.prediction_cooldown_hours
        self.cooldown_hours = cooldown_hours or DEFAULT_COOLDOWN_HOURS

    async def on_order_placed(self, order: PlacedOrder) -> list[GateOutcome]:
        """
        Run the gate for every line of a placed order.

        Never raises: order placement must not fail because forecasting did.
        """
        outcomes = []
        try:
            if not order or not order.order_id:
                return outcomes

            for line in order.lines:
                try:
                    outcomes.append(await self.process_line(line))
                except Exception as e:
                    logger.exception(f"Prediction gate failed for SKU {line.sku}: {e}")
                    outcomes.append(GateOutcome.ERROR)
        except Exception as e:
            logger.exception(f"Error in order placement hook: {e}")

        return outcomes

    async def process_line(self, line: OrderLine, now: datetime | None = None) -> GateOutcome:
        """Evaluate a single order line."""
        now = now or datetime.now(timezone.utc)

        params = await self.store.get_parameters(line.sku) if line.sku else None
        if params is None or not params.has_alert_threshold:
            return GateOutcome.NOT_TRACKED

        if await self.notifications.has_existing_notification(line.sku):
            return GateOutcome.ALREADY_NOTIFIED
        if await self.was_prediction_made_recently(line.sku, now):
            return GateOutcome.COOLDOWN

        stock_qty = await self.resolve_stock_qty(line)
        try:
            prediction = await self.client.predict(line.sku, int(stock_qty or 0))
        except TransportError as e:
            logger.error(f"Predict API request failed for {line.sku}: {e}")
            return GateOutcome.PREDICTION_FAILED

        days_remaining = prediction.get("days_of_stock_remaining")
        if not is_numeric(days_remaining):
            logger.warning(f"Prediction for {line.sku} has no days_of_stock_remaining: {prediction}")
            return GateOutcome.PREDICTION_FAILED
        days_remaining = int(float(days_remaining))

        await self.cooldowns.mark_predicted(line.sku, now)

        if days_remaining < params.alert_threshold:
            await self.notifications.create_low_stock_notification(line.sku, days_remaining)
            return GateOutcome.ALERTED

        return GateOutcome.PREDICTED

    async def was_prediction_made_recently(self, sku: str, now: datetime) -> bool:
        cutoff = now - timedelta(hours=self.cooldown_hours)
        return await self.cooldowns.updated_since(sku, cutoff)

    async def resolve_stock_qty(self, line: OrderLine) -> float | None:
        """Preloaded stock first, then the stock registry."""
        if line.stock_qty is not None:
            return float(line.stock_qty)
        if line.product_id is None:
            return None
        try:
            qty = await self.stock.get_qty(line.product_id)
        except Exception as e:
            logger.warning(f"Could not get stock quantity for {line.sku}: {e}")
            return None
        return float(qty) if qty is not None else None

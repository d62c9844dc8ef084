"""Low-stock notification sinks."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockout_predict.db.models import NotificationSeverity
from stockout_predict.db.repositories import NotificationRepository

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE_PATTERN = "Low Stock Warning: {sku}"
NOTIFICATION_DESCRIPTION_PATTERN = (
    "Product SKU {sku} is predicted to run out of stock in {days} days."
)


def notification_title(sku: str) -> str:
    return NOTIFICATION_TITLE_PATTERN.format(sku=sku)


class NotificationSink(ABC):
    """Where low-stock warnings are recorded."""

    @abstractmethod
    async def has_existing_notification(self, sku: str) -> bool:
        """True if a warning for this SKU exists and was not removed, read or not."""
        pass

    @abstractmethod
    async def create_low_stock_notification(self, sku: str, days_remaining: int) -> None:
        pass


class DatabaseNotificationSink(NotificationSink):
    """Warnings stored as admin inbox notifications."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def has_existing_notification(self, sku: str) -> bool:
        # Exact title match so one SKU never shadows another sharing its prefix.
        async with self.session_maker() as session:
            count = await NotificationRepository(session).count_active_by_title(
                notification_title(sku)
            )
        return count > 0

    async def create_low_stock_notification(self, sku: str, days_remaining: int) -> None:
        async with self.session_maker() as session:
            await NotificationRepository(session).create(
                title=notification_title(sku),
                description=NOTIFICATION_DESCRIPTION_PATTERN.format(
                    sku=sku, days=days_remaining
                ),
                date_added=datetime.now(timezone.utc),
                severity=NotificationSeverity.MAJOR,
            )
            await session.commit()
        logger.info(f"Low stock notification created for {sku} ({days_remaining} days)")

"""Admin notification repository for database operations."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockout_predict.db.models import AdminNotification, NotificationSeverity


class NotificationRepository:
    """Repository for admin inbox notifications."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        title: str,
        description: str,
        date_added: datetime,
        severity: int = NotificationSeverity.MAJOR,
        url: str = "",
    ) -> AdminNotification:
        """Create a new notification."""
        notification = AdminNotification(
            severity=int(severity),
            date_added=date_added,
            title=title,
            description=description,
            url=url,
            is_read=False,
            is_removed=False,
        )
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def count_active_by_title(self, title: str) -> int:
        """Count notifications with this exact title that were not removed."""
        result = await self.session.execute(
            select(func.count(AdminNotification.id)).where(
                AdminNotification.title == title,
                AdminNotification.is_removed == False,  # noqa: E712
            )
        )
        return result.scalar() or 0

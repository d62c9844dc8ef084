"""Sales history repository for database operations."""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockout_predict.db.models import SalesOrderItem


class SalesRepository:
    """Repository for paged reads of historical order lines."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _filtered(self, stmt, skus: list[str], before: date):
        return stmt.where(
            SalesOrderItem.sku.in_(skus),
            SalesOrderItem.created_at < before,
        )

    async def count(self, skus: list[str], before: date) -> int:
        """Count order lines for the given SKUs created before a date."""
        stmt = self._filtered(select(func.count(SalesOrderItem.id)), skus, before)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_page(
        self,
        skus: list[str],
        before: date,
        page: int,
        page_size: int,
    ) -> list[SalesOrderItem]:
        """Get one page (1-based) of order lines, ordered by order id."""
        stmt = (
            self._filtered(select(SalesOrderItem), skus, before)
            .order_by(SalesOrderItem.order_id.asc(), SalesOrderItem.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

"""Stock repository for database operations."""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockout_predict.db.models import StockItem


class StockRepository:
    """Repository for current stock levels."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_qty(self, product_id: int) -> Decimal | None:
        """Get the current stock quantity for a product."""
        result = await self.session.execute(
            select(StockItem.qty).where(StockItem.product_id == product_id)
        )
        return result.scalar_one_or_none()

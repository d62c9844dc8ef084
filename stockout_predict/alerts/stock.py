"""Current stock quantity lookup."""

from abc import ABC, abstractmethod
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockout_predict.db.repositories import StockRepository


class StockLookup(ABC):
    """Registry of current stock quantities by product id."""

    @abstractmethod
    async def get_qty(self, product_id: int) -> Decimal | float | None:
        pass


class DatabaseStockLookup(StockLookup):
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def get_qty(self, product_id: int) -> Decimal | None:
        async with self.session_maker() as session:
            return await StockRepository(session).get_qty(product_id)

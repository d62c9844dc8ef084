"""Historical sales readers consumed by the exporter."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockout_predict.db.repositories import SalesRepository


@dataclass
class SalesObservation:
    """One historical order line."""
    order_id: int
    sku: str | None
    qty_ordered: Decimal | float
    created_at: datetime | str


class SalesHistoryReader(ABC):
    """Paged access to order lines filtered by SKU set and date."""

    @abstractmethod
    async def count(self, skus: list[str], before: date) -> int:
        pass

    @abstractmethod
    async def fetch_page(
        self, skus: list[str], before: date, page: int, page_size: int
    ) -> list[SalesObservation]:
        """Return page ``page`` (1-based) ordered by order id ascending."""
        pass


class DatabaseSalesReader(SalesHistoryReader):
    """Reads order lines from the ``sales_order_items`` table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def count(self, skus: list[str], before: date) -> int:
        async with self.session_maker() as session:
            return await SalesRepository(session).count(skus, before)

    async def fetch_page(
        self, skus: list[str], before: date, page: int, page_size: int
    ) -> list[SalesObservation]:
        async with self.session_maker() as session:
            items = await SalesRepository(session).get_page(skus, before, page, page_size)
        return [
            SalesObservation(
                order_id=item.order_id,
                sku=item.sku,
                qty_ordered=item.qty_ordered,
                created_at=item.created_at,
            )
            for item in items
        ]

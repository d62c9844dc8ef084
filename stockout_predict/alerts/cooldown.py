"""Per-SKU forecast cooldown flags."""

from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockout_predict.db.repositories import FlagRepository

FLAG_CODE_PREFIX = "stockout_predict_"


def flag_code(sku: str) -> str:
    return f"{FLAG_CODE_PREFIX}{sku}"


class CooldownFlagStore(ABC):
    """Records when a forecast was last requested for a SKU."""

    @abstractmethod
    async def updated_since(self, sku: str, cutoff: datetime) -> bool:
        """True if a forecast was requested for the SKU at or after cutoff."""
        pass

    @abstractmethod
    async def mark_predicted(self, sku: str, at: datetime) -> None:
        pass


class DatabaseCooldownStore(CooldownFlagStore):
    """Cooldown flags kept in the ``flags`` table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def updated_since(self, sku: str, cutoff: datetime) -> bool:
        async with self.session_maker() as session:
            return await FlagRepository(session).updated_since(flag_code(sku), cutoff)

    async def mark_predicted(self, sku: str, at: datetime) -> None:
        async with self.session_maker() as session:
            await FlagRepository(session).upsert(
                flag_code(sku),
                flag_data={"sku": sku, "prediction_time": at.strftime("%Y-%m-%d %H:%M:%S")},
                last_update=at,
            )
            await session.commit()

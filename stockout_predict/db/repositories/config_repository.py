"""Config value repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockout_predict.db.models import ConfigValue


class ConfigRepository:
    """Repository for ConfigValue reads and upserts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_path(self, path: str) -> ConfigValue | None:
        """Get the config entry stored under a path."""
        result = await self.session.execute(
            select(ConfigValue).where(ConfigValue.path == path)
        )
        return result.scalar_one_or_none()

    async def get_value(self, path: str) -> str | None:
        """Get the raw value stored under a path."""
        entry = await self.get_by_path(path)
        return entry.value if entry else None

    async def save_value(self, path: str, value: str | None) -> ConfigValue:
        """Insert or overwrite the value stored under a path."""
        entry = await self.get_by_path(path)
        if entry:
            entry.value = value
        else:
            entry = ConfigValue(path=path, value=value)
            self.session.add(entry)
        await self.session.flush()
        return entry

"""Persisted key/value configuration backends."""

import logging
from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockout_predict.db.repositories import ConfigRepository
from stockout_predict.errors import PersistenceError

logger = logging.getLogger(__name__)


class ConfigBackend(ABC):
    """Read/write/invalidate access to serialized config values."""

    @abstractmethod
    async def read(self, path: str) -> str | None:
        """Return the value stored under path, possibly from cache."""
        pass

    @abstractmethod
    async def write(self, path: str, value: str) -> None:
        """
        Persist value under path.

        Raises PersistenceError if the write fails.
        """
        pass

    @abstractmethod
    def invalidate(self) -> None:
        """Drop cached values so the next read hits storage."""
        pass


class DatabaseConfigBackend(ConfigBackend):
    """Config values in the ``config_values`` table with an in-process read cache."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker
        self._cache: dict[str, str | None] = {}

    async def read(self, path: str) -> str | None:
        if path in self._cache:
            return self._cache[path]

        async with self.session_maker() as session:
            value = await ConfigRepository(session).get_value(path)

        self._cache[path] = value
        return value

    async def write(self, path: str, value: str) -> None:
        try:
            async with self.session_maker() as session:
                await ConfigRepository(session).save_value(path, value)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save config value {path}: {e}")
            raise PersistenceError(f"Could not save {path}") from e

    def invalidate(self) -> None:
        self._cache.clear()

"""Canonical per-SKU parameter collection.

The collection is persisted as one JSON array under a single config path, so
every mutation is read-full, merge in memory, write-full. Mutations on a store
instance are serialized through an ``asyncio.Lock`` and always start from a
freshly invalidated read; concurrent writers in other processes still follow
last-writer-wins.
"""

import asyncio
import json
import logging
from typing import Any

from stockout_predict.errors import ConfigError
from .backend import ConfigBackend
from .fields import SKU_KEY, SkuParameterRow, is_empty

logger = logging.getLogger(__name__)

SKU_PARAMETERS_PATH = "stockout/accuracy_validation/sku_parameters"


class ParameterStore:
    """Get, list and merge-update per-SKU forecasting parameters."""

    def __init__(self, backend: ConfigBackend, path: str = SKU_PARAMETERS_PATH):
        self.backend = backend
        self.path = path
        self._write_lock = asyncio.Lock()

    def refresh(self) -> None:
        """Invalidate cached config so the next read sees other processes' writes."""
        self.backend.invalidate()

    async def list_skus(self) -> list[str]:
        """All non-empty SKUs in storage order."""
        rows = await self._read_rows()
        return [str(row[SKU_KEY]) for row in rows if not is_empty(row.get(SKU_KEY))]

    async def get_parameters(self, sku: str) -> SkuParameterRow | None:
        """First row whose SKU equals the argument, or None."""
        for row in await self._read_rows():
            if not is_empty(row.get(SKU_KEY)) and str(row[SKU_KEY]) == sku:
                return SkuParameterRow.from_blob(row)
        return None

    async def list_all_parameters(self, force_refresh: bool = False) -> list[SkuParameterRow]:
        """All rows in storage order; force_refresh bypasses the read cache."""
        rows = await self._read_rows(force_refresh=force_refresh)
        return [SkuParameterRow.from_blob(row) for row in rows]

    async def merge_parameters(self, sku: str, parameters: dict[str, Any]) -> bool:
        """
        Shallow-merge fields into the row for a SKU, appending it if absent.

        Args:
            sku: Row key
            parameters: Blob fields to overwrite; other fields are kept

        Returns:
            True if the collection was persisted, False otherwise
        """
        return await self.batch_merge_parameters({sku: parameters})

    async def batch_merge_parameters(self, updates: dict[str, dict[str, Any]]) -> bool:
        """
        Apply several merges in one read-modify-write of the collection.

        Returns:
            True if the collection was persisted, False otherwise
        """
        if any(is_empty(sku) for sku in updates):
            logger.warning("Refusing to merge parameters for an empty SKU")
            return False

        async with self._write_lock:
            try:
                self.backend.invalidate()
                rows = self._decode(await self.backend.read(self.path))

                index: dict[str, int] = {}
                for position, row in enumerate(rows):
                    if isinstance(row, dict) and not is_empty(row.get(SKU_KEY)):
                        index.setdefault(str(row[SKU_KEY]), position)

                for sku, parameters in updates.items():
                    fields = {k: v for k, v in parameters.items() if k != SKU_KEY}
                    if sku in index:
                        rows[index[sku]] = {**rows[index[sku]], **fields}
                    else:
                        rows.append({SKU_KEY: sku, **fields})
                        index[sku] = len(rows) - 1

                await self.backend.write(self.path, json.dumps(rows))
            except Exception as e:
                logger.error(f"Failed to update parameters for {list(updates)}: {e}")
                return False
            finally:
                self.backend.invalidate()

        logger.info(f"Updated parameters for {len(updates)} SKU(s)")
        return True

    async def _read_rows(self, force_refresh: bool = False) -> list[dict]:
        if force_refresh:
            self.backend.invalidate()

        raw = await self.backend.read(self.path)
        try:
            rows = self._decode(raw)
        except ConfigError as e:
            logger.warning(f"Ignoring unreadable SKU parameters: {e}")
            return []

        return [row for row in rows if isinstance(row, dict)]

    @staticmethod
    def _decode(raw: str | None) -> list:
        if not raw:
            return []
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"SKU parameters are not valid JSON: {e}") from e
        if isinstance(rows, dict):
            # Older saves keyed rows by an opaque row id.
            rows = list(rows.values())
        if not isinstance(rows, list):
            raise ConfigError("SKU parameters must be a JSON array")
        return rows

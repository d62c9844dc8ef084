"""Shared fakes for the external collaborators."""

import asyncio
import json
from datetime import date, datetime

import pytest

from stockout_predict.alerts import CooldownFlagStore, NotificationSink, StockLookup
from stockout_predict.errors import PersistenceError
from stockout_predict.export import SalesHistoryReader, SalesObservation
from stockout_predict.parameters import ConfigBackend, ParameterStore, SKU_PARAMETERS_PATH


class InMemoryConfigBackend(ConfigBackend):
    """Config backend with a read cache, mirroring the database backend."""

    def __init__(self, values: dict | None = None):
        self.values: dict[str, str] = dict(values or {})
        self._cache: dict[str, str | None] = {}
        self.storage_reads = 0
        self.writes = 0
        self.fail_writes = False

    async def read(self, path):
        if path in self._cache:
            return self._cache[path]
        await asyncio.sleep(0)
        self.storage_reads += 1
        value = self.values.get(path)
        self._cache[path] = value
        return value

    async def write(self, path, value):
        await asyncio.sleep(0)
        if self.fail_writes:
            raise PersistenceError("write failed")
        self.writes += 1
        self.values[path] = value

    def invalidate(self):
        self._cache.clear()

    def rows(self) -> list[dict]:
        return json.loads(self.values.get(SKU_PARAMETERS_PATH) or "[]")


class FakeSalesReader(SalesHistoryReader):
    """Applies the same filter, order and paging as the database reader."""

    def __init__(self, observations: list[SalesObservation]):
        self.observations = observations
        self.pages_fetched: list[int] = []

    def _matching(self, skus, before):
        def created(item):
            value = item.created_at
            return value.date() if isinstance(value, datetime) else date.fromisoformat(value[:10])

        rows = [o for o in self.observations if o.sku in skus and created(o) < before]
        return sorted(rows, key=lambda o: o.order_id)

    async def count(self, skus, before):
        return len(self._matching(skus, before))

    async def fetch_page(self, skus, before, page, page_size):
        self.pages_fetched.append(page)
        start = (page - 1) * page_size
        return self._matching(skus, before)[start:start + page_size]


class FakeNotificationSink(NotificationSink):
    def __init__(self, existing: set[str] | None = None):
        self.existing = set(existing or ())
        self.created: list[tuple[str, int]] = []

    async def has_existing_notification(self, sku):
        return sku in self.existing

    async def create_low_stock_notification(self, sku, days_remaining):
        self.created.append((sku, days_remaining))
        self.existing.add(sku)


class FakeCooldownStore(CooldownFlagStore):
    def __init__(self, flags: dict[str, datetime] | None = None):
        self.flags = dict(flags or {})

    async def updated_since(self, sku, cutoff):
        last = self.flags.get(sku)
        return last is not None and last >= cutoff

    async def mark_predicted(self, sku, at):
        self.flags[sku] = at


class FakeStockLookup(StockLookup):
    def __init__(self, quantities: dict[int, float] | None = None):
        self.quantities = dict(quantities or {})
        self.lookups: list[int] = []

    async def get_qty(self, product_id):
        self.lookups.append(product_id)
        return self.quantities.get(product_id)


def seed_backend(rows: list[dict]) -> InMemoryConfigBackend:
    return InMemoryConfigBackend({SKU_PARAMETERS_PATH: json.dumps(rows)})


@pytest.fixture
def backend():
    return seed_backend([
        {"sku": "SKU-A", "alert_threshold": "5", "changepoint_prior_scale": "0.05", "lock_params": ""},
        {"sku": "SKU-B", "alert_threshold": "", "lock_params": "params", "seasonality_mode": "additive"},
    ])


@pytest.fixture
def store(backend):
    return ParameterStore(backend)

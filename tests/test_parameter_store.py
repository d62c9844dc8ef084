"""Tests for the per-SKU parameter store."""

import asyncio
import json

import pytest

from stockout_predict.parameters import LockMode, ParameterStore, SKU_PARAMETERS_PATH

from conftest import InMemoryConfigBackend, seed_backend


class TestReads:
    """Tests for list/get operations."""

    @pytest.mark.asyncio
    async def test_list_skus_in_storage_order(self, store):
        """Test SKUs come back in storage order."""
        assert await store.list_skus() == ["SKU-A", "SKU-B"]

    @pytest.mark.asyncio
    async def test_list_skus_skips_rows_without_sku(self):
        """Test rows with an empty SKU are not listed."""
        store = ParameterStore(seed_backend([{"sku": ""}, {"alert_threshold": "3"}, {"sku": "X"}]))

        assert await store.list_skus() == ["X"]

    @pytest.mark.asyncio
    async def test_missing_blob_is_empty(self):
        """Test an absent blob yields an empty collection."""
        store = ParameterStore(InMemoryConfigBackend())

        assert await store.list_skus() == []
        assert await store.list_all_parameters() == []
        assert await store.get_parameters("SKU-A") is None

    @pytest.mark.asyncio
    async def test_unparseable_blob_fails_soft(self):
        """Test a corrupt blob reads as empty instead of raising."""
        store = ParameterStore(InMemoryConfigBackend({SKU_PARAMETERS_PATH: "{not json"}))

        assert await store.list_skus() == []
        assert await store.list_all_parameters(force_refresh=True) == []

    @pytest.mark.asyncio
    async def test_row_keyed_object_blob(self):
        """Test a blob stored as an object of rows is read like an array."""
        store = ParameterStore(InMemoryConfigBackend({
            SKU_PARAMETERS_PATH: json.dumps({"_1": {"sku": "A"}, "_2": {"sku": "B"}}),
        }))

        assert await store.list_skus() == ["A", "B"]

    @pytest.mark.asyncio
    async def test_get_parameters_unknown_sku(self, store):
        """Test unknown SKUs are not found."""
        assert await store.get_parameters("NOPE") is None

    @pytest.mark.asyncio
    async def test_get_parameters_first_match_wins(self):
        """Test duplicates are not deduplicated; the first row is returned."""
        store = ParameterStore(seed_backend([
            {"sku": "DUP", "alert_threshold": "1"},
            {"sku": "DUP", "alert_threshold": "9"},
        ]))

        row = await store.get_parameters("DUP")

        assert row.alert_threshold == 1

    @pytest.mark.asyncio
    async def test_numeric_sku_is_found(self):
        """Test a SKU stored as a JSON number matches its string form."""
        store = ParameterStore(seed_backend([{"sku": 123, "alert_threshold": "4"}]))

        row = await store.get_parameters("123")

        assert await store.list_skus() == ["123"]
        assert row is not None
        assert row.alert_threshold == 4

    @pytest.mark.asyncio
    async def test_get_parameters_parses_fields(self, store):
        """Test stored strings are parsed into typed values."""
        row = await store.get_parameters("SKU-A")

        assert row.sku == "SKU-A"
        assert row.alert_threshold == 5
        assert row.changepoint_prior_scale == pytest.approx(0.05)
        assert row.seasonality_mode is None
        assert row.lock_params is LockMode.NONE

        other = await store.get_parameters("SKU-B")
        assert other.alert_threshold is None
        assert other.lock_params is LockMode.PARAMS
        assert other.seasonality_mode == "additive"

    @pytest.mark.asyncio
    async def test_force_refresh_sees_external_writes(self, backend, store):
        """Test force_refresh bypasses a warm cache."""
        await store.list_all_parameters()
        backend.values[SKU_PARAMETERS_PATH] = json.dumps([{"sku": "NEW"}])

        stale = await store.list_all_parameters()
        fresh = await store.list_all_parameters(force_refresh=True)

        assert [r.sku for r in stale] == ["SKU-A", "SKU-B"]
        assert [r.sku for r in fresh] == ["NEW"]

    @pytest.mark.asyncio
    async def test_refresh_invalidates_cache(self, backend, store):
        """Test the explicit refresh handle drops cached values."""
        await store.list_skus()
        backend.values[SKU_PARAMETERS_PATH] = json.dumps([{"sku": "NEW"}])

        store.refresh()

        assert await store.list_skus() == ["NEW"]


class TestMerge:
    """Tests for merge and batch merge."""

    @pytest.mark.asyncio
    async def test_partial_merges_accumulate(self, backend, store):
        """Test two partial merges keep each other's fields."""
        assert await store.merge_parameters("SKU-C", {"changepoint_prior_scale": 1})
        assert await store.merge_parameters("SKU-C", {"seasonality_prior_scale": 2})

        row = await store.get_parameters("SKU-C")

        assert row.raw["changepoint_prior_scale"] == 1
        assert row.raw["seasonality_prior_scale"] == 2

    @pytest.mark.asyncio
    async def test_merge_keeps_other_fields_and_rows(self, backend, store):
        """Test merging into an existing row is shallow and order-preserving."""
        backend.values[SKU_PARAMETERS_PATH] = json.dumps([
            {"sku": "SKU-A", "alert_threshold": "5", "custom_note": "keep me"},
            {"sku": "SKU-B", "alert_threshold": "7"},
        ])

        assert await store.merge_parameters("SKU-A", {"seasonality_mode": "multiplicative"})

        rows = backend.rows()
        assert [r["sku"] for r in rows] == ["SKU-A", "SKU-B"]
        assert rows[0] == {
            "sku": "SKU-A",
            "alert_threshold": "5",
            "custom_note": "keep me",
            "seasonality_mode": "multiplicative",
        }
        assert rows[1] == {"sku": "SKU-B", "alert_threshold": "7"}

    @pytest.mark.asyncio
    async def test_merge_appends_new_row(self, backend, store):
        """Test an unknown SKU is appended at the end."""
        assert await store.merge_parameters("SKU-Z", {"alert_threshold": 4})

        rows = backend.rows()
        assert rows[-1] == {"sku": "SKU-Z", "alert_threshold": 4}
        assert len(rows) == 3

    @pytest.mark.asyncio
    async def test_merge_is_visible_to_next_read(self, backend, store):
        """Test the cache is invalidated after a write."""
        await store.list_skus()

        await store.merge_parameters("SKU-Z", {"alert_threshold": 4})

        assert "SKU-Z" in await store.list_skus()

    @pytest.mark.asyncio
    async def test_merge_reads_fresh_state(self, backend, store):
        """Test a merge does not write back a stale cached collection."""
        await store.list_skus()
        backend.values[SKU_PARAMETERS_PATH] = json.dumps([{"sku": "OTHER-PROCESS"}])

        await store.merge_parameters("SKU-A", {"alert_threshold": 1})

        assert [r["sku"] for r in backend.rows()] == ["OTHER-PROCESS", "SKU-A"]

    @pytest.mark.asyncio
    async def test_merge_write_failure_returns_false(self, backend, store):
        """Test persistence errors surface as False, not as exceptions."""
        backend.fail_writes = True

        assert await store.merge_parameters("SKU-A", {"alert_threshold": 1}) is False

    @pytest.mark.asyncio
    async def test_merge_refuses_to_overwrite_corrupt_blob(self):
        """Test a corrupt blob is left untouched by a merge."""
        backend = InMemoryConfigBackend({SKU_PARAMETERS_PATH: "{not json"})
        store = ParameterStore(backend)

        assert await store.merge_parameters("SKU-A", {"alert_threshold": 1}) is False
        assert backend.values[SKU_PARAMETERS_PATH] == "{not json"

    @pytest.mark.asyncio
    async def test_merge_empty_sku_rejected(self, backend, store):
        """Test merging without a SKU is rejected."""
        assert await store.merge_parameters("", {"alert_threshold": 1}) is False
        assert backend.writes == 0

    @pytest.mark.asyncio
    async def test_merge_cannot_rename_row(self, backend, store):
        """Test a sku key inside the partial fields is ignored."""
        await store.merge_parameters("SKU-A", {"sku": "HIJACK", "alert_threshold": "2"})

        assert [r["sku"] for r in backend.rows()] == ["SKU-A", "SKU-B"]

    @pytest.mark.asyncio
    async def test_merge_numeric_sku_updates_existing_row(self):
        """Test merging by the string form of a numeric SKU does not add a duplicate row."""
        backend = seed_backend([{"sku": 123, "alert_threshold": "4"}])
        store = ParameterStore(backend)

        assert await store.merge_parameters("123", {"alert_threshold": "7"}) is True

        assert backend.rows() == [{"sku": 123, "alert_threshold": "7"}]

    @pytest.mark.asyncio
    async def test_batch_merge_appends_n_new_rows(self, backend, store):
        """Test N updates for N new SKUs append exactly N rows."""
        before = backend.rows()
        updates = {f"NEW-{i}": {"alert_threshold": i} for i in range(4)}

        assert await store.batch_merge_parameters(updates)

        rows = backend.rows()
        assert len(rows) == len(before) + 4
        assert rows[:len(before)] == before
        assert [r["sku"] for r in rows[len(before):]] == ["NEW-0", "NEW-1", "NEW-2", "NEW-3"]

    @pytest.mark.asyncio
    async def test_batch_merge_single_write(self, backend, store):
        """Test a batch is persisted in one write."""
        await store.batch_merge_parameters({
            "SKU-A": {"alert_threshold": "9"},
            "SKU-B": {"daily_seasonality": "1"},
            "SKU-C": {"alert_threshold": "2"},
        })

        assert backend.writes == 1
        rows = {r["sku"]: r for r in backend.rows()}
        assert rows["SKU-A"]["alert_threshold"] == "9"
        assert rows["SKU-A"]["changepoint_prior_scale"] == "0.05"
        assert rows["SKU-B"]["daily_seasonality"] == "1"
        assert rows["SKU-C"] == {"sku": "SKU-C", "alert_threshold": "2"}

    @pytest.mark.asyncio
    async def test_concurrent_merges_do_not_lose_writes(self, backend, store):
        """Test concurrent merges on one store are serialized."""
        await asyncio.gather(*[
            store.merge_parameters(f"CONC-{i}", {"alert_threshold": i}) for i in range(10)
        ])

        skus = [r["sku"] for r in backend.rows()]
        for i in range(10):
            assert f"CONC-{i}" in skus

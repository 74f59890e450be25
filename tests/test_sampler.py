# ==============================================
# Tests for Sampling Module
# ==============================================

import asyncio

import pytest

from schema_sampler.errors import DataSourceError, InferenceCancelled
from schema_sampler.sampling import Sampler, compute_sample_size


async def _collect(iterator):
    return [item async for item in iterator]


class TestSampleSize:

    def test_small_collection_uses_default(self):
        assert compute_sample_size(100) == 10000

    def test_huge_collection_uses_square_root(self):
        assert compute_sample_size(10 ** 10) == 100000

    def test_empty_collection(self):
        assert compute_sample_size(0) == 10000

    def test_rounds_square_root(self):
        # sqrt(2 * 10**8) ≈ 14142.1
        assert compute_sample_size(2 * 10 ** 8) == 14142

    def test_custom_default(self):
        assert compute_sample_size(100, default_sample_size=5) == 10

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            compute_sample_size(-1)


class TestSampler:

    @pytest.mark.asyncio
    async def test_count_and_size_from_estimated_count(self, make_store):
        store = make_store(count=10 ** 10)
        assert await Sampler(store).size_sample() == (10 ** 10, 100000)

    @pytest.mark.asyncio
    async def test_yields_up_to_size(self, make_store, sample_documents):
        store = make_store(sample_documents * 5)
        documents = await _collect(Sampler(store).sample(4))
        assert len(documents) == 4

    @pytest.mark.asyncio
    async def test_duplicates_pass_through(self, make_store):
        doc = {"a": 1}
        store = make_store([doc, doc, doc])
        assert await _collect(Sampler(store).sample(10)) == [doc, doc, doc]

    @pytest.mark.asyncio
    async def test_query_forwarded_to_store(self, fake_store):
        sampler = Sampler(fake_store, query={"a": {"$exists": True}})
        await _collect(sampler.sample(10))
        assert fake_store.sample_calls == [(10, {"a": {"$exists": True}})]

    @pytest.mark.asyncio
    async def test_count_failure_is_data_source_error(self, make_store):
        store = make_store(count_error=ConnectionError("refused"))
        with pytest.raises(DataSourceError):
            await Sampler(store).size_sample()

    @pytest.mark.asyncio
    async def test_invalid_count_is_data_source_error(self, make_store):
        store = make_store(count=-5)
        with pytest.raises(DataSourceError):
            await Sampler(store).estimate_count()

    @pytest.mark.asyncio
    async def test_sampling_failure_not_replaced_by_empty_sample(self, make_store, sample_documents):
        store = make_store(sample_documents, sample_error=RuntimeError("cursor died"), fail_after=1)
        with pytest.raises(DataSourceError):
            await _collect(Sampler(store).sample(10))

    @pytest.mark.asyncio
    async def test_typed_store_errors_propagate_unchanged(self, make_store, sample_documents):
        error = DataSourceError("boom")
        store = make_store(sample_documents, sample_error=error)
        with pytest.raises(DataSourceError) as excinfo:
            await _collect(Sampler(store).sample(10))
        assert excinfo.value is error

    @pytest.mark.asyncio
    async def test_cancel_stops_pulling(self, make_store, sample_documents):
        event = asyncio.Event()
        store = make_store(sample_documents, cancel_after=1)
        with pytest.raises(InferenceCancelled):
            await _collect(Sampler(store).sample(10, cancel_event=event))
        assert store.pulled == 1

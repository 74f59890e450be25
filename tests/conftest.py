# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - sample_documents  → the three-document example collection
# - fake_store        → in-memory DocumentStore over sample_documents
# - make_store        → FakeDocumentStore class, for custom counts/failures
# - config            → quiet AppConfig with default sampling
#
# FakeDocumentStore records every call so tests can assert how many
# documents were pulled and which pipelines were sent.
# ==============================================

import pytest

from schema_sampler.config import AppConfig, MongoConfig, SamplingConfig
from schema_sampler.errors import InferenceCancelled


class FakeDocumentStore:
    """In-memory stand-in for MongoDocumentStore."""

    def __init__(
        self,
        documents=None,
        count=None,
        partial_results=None,
        count_error=None,
        sample_error=None,
        aggregation_error=None,
        fail_after=0,
        cancel_after=None,
    ):
        self.documents = list(documents or [])
        self.count = len(self.documents) if count is None else count
        self.partial_results = list(partial_results or [])
        self.count_error = count_error
        self.sample_error = sample_error
        self.aggregation_error = aggregation_error
        self.fail_after = fail_after
        self.cancel_after = cancel_after  # Simulates an external signal mid-stream

        self.sample_calls = []
        self.pipelines = []
        self.pulled = 0

    async def estimate_count(self):
        if self.count_error is not None:
            raise self.count_error
        return self.count

    async def sample(self, size, query=None, cancel_event=None):
        self.sample_calls.append((size, query))
        async for item in self._stream(self.documents[:size], self.sample_error, cancel_event):
            yield item

    async def run_aggregation(self, pipeline, cancel_event=None):
        self.pipelines.append(pipeline)
        async for item in self._stream(self.partial_results, self.aggregation_error, cancel_event):
            yield item

    async def _stream(self, items, error, cancel_event):
        for item in items:
            if cancel_event is not None and cancel_event.is_set():
                raise InferenceCancelled("cancelled")
            if error is not None and self.pulled >= self.fail_after:
                raise error
            self.pulled += 1
            yield item
            if self.cancel_after is not None and self.pulled >= self.cancel_after:
                cancel_event.set()


@pytest.fixture
def make_store():
    """Factory for FakeDocumentStore with custom behaviour."""
    return FakeDocumentStore


@pytest.fixture
def sample_documents():
    """{a:1,b:"x"}, {a:2}, {c:true}"""
    return [
        {"a": 1, "b": "x"},
        {"a": 2},
        {"c": True},
    ]


@pytest.fixture
def fake_store(sample_documents):
    return FakeDocumentStore(sample_documents)


@pytest.fixture
def config():
    """Quiet config with the default sample size."""
    return AppConfig(
        mongo=MongoConfig(collection="test_collection"),
        sampling=SamplingConfig(),
        verbose=False
    )

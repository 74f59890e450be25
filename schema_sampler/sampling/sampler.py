# ==============================================
# Sampler
# ==============================================
#
# PURPOSE:
#   Size the sample from the collection's estimated document count
#   and stream that many documents from the store.
#
# SAMPLE SIZE:
#   sample_size = round(max(default_sample_size, sqrt(N)))
#
#     N = 100     → 10000   (default wins)
#     N = 10**10  → 100000  (sqrt wins)
#
#   N may be stale; the estimate only sizes the sample.
#
# CLASS: Sampler
# --------------
#   Constructor:
#   ------------
#   - __init__(store: DocumentStore, default_sample_size=10000, query=None)
#
#   Methods:
#   --------
#   - async size_sample() -> (document_count, sample_size)
#       Ask the store for its estimated count and size the sample.
#
#   - async sample(size, cancel_event=None) -> AsyncIterator[dict]
#       Up to `size` documents. The store's sampling primitive may
#       return the same document more than once; callers must not
#       rely on distinct identities.
#
# ERRORS:
#   Any failure of the store surfaces as DataSourceError. An empty
#   sample is never substituted for a failed one.
#
# ==============================================

import asyncio
import math
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Optional, Tuple

from schema_sampler.config import DEFAULT_SAMPLE_SIZE
from schema_sampler.errors import DataSourceError, SchemaSamplerError
from schema_sampler.storage.document_store import DocumentStore


def compute_sample_size(document_count: int, default_sample_size: int = DEFAULT_SAMPLE_SIZE) -> int:
    """
    Number of documents to sample for a collection of `document_count`.

    Args:
        document_count: Estimated number of documents (non-negative)
        default_sample_size: Lower bound on the sample size

    Returns:
        round(max(default_sample_size, sqrt(document_count)))

    Raises:
        ValueError: If document_count is negative
    """
    if document_count < 0:
        raise ValueError(f"document_count must be non-negative, got {document_count}")
    return int(round(max(float(default_sample_size), math.sqrt(document_count))))


class Sampler:
    """Streams a statistically sized random sample from a document store."""

    def __init__(
        self,
        store: DocumentStore,
        default_sample_size: int = DEFAULT_SAMPLE_SIZE,
        query: Optional[Dict[str, Any]] = None
    ):
        self.store = store
        self.default_sample_size = default_sample_size
        self.query = query

    async def estimate_count(self) -> int:
        try:
            count = await self.store.estimate_count()
        except SchemaSamplerError:
            raise
        except Exception as e:
            raise DataSourceError(f"Document count failed: {e}") from e

        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise DataSourceError(f"Store returned an invalid document count: {count!r}")
        return count

    async def size_sample(self) -> Tuple[int, int]:
        """Estimated count and the sample size derived from it."""
        document_count = await self.estimate_count()
        return document_count, compute_sample_size(document_count, self.default_sample_size)

    async def sample(
        self,
        size: int,
        cancel_event: Optional[asyncio.Event] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield up to `size` raw documents drawn at random.

        Args:
            size: Maximum number of documents to yield
            cancel_event: Passed to the store; stops further batch requests

        Yields:
            Raw documents, possibly repeated
        """
        yielded = 0
        stream = self.store.sample(size, query=self.query, cancel_event=cancel_event)
        try:
            async with aclosing(stream):
                async for document in stream:
                    yield document
                    yielded += 1
                    if yielded >= size:
                        break
        except SchemaSamplerError:
            raise
        except Exception as e:
            raise DataSourceError(f"Sampling failed after {yielded} documents: {e}") from e

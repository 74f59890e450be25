# ==============================================
# DocumentStore (Protocol)
# ==============================================
#
# PURPOSE:
#   The three operations the inference core needs from a document
#   store. MongoDocumentStore implements them against MongoDB;
#   tests use an in-memory fake.
#
#   - estimate_count() -> int
#       Approximate total document count. Staleness is fine.
#
#   - sample(size, query=None, cancel_event=None) -> AsyncIterator[dict]
#       Up to `size` random documents matching `query`.
#
#   - run_aggregation(pipeline, cancel_event=None) -> AsyncIterator[dict]
#       Partial result records of a server-side computation.
#
#   Each call is single-attempt. Failures raise DataSourceError; a set
#   cancel_event stops further batch requests and raises
#   InferenceCancelled.
#
# ==============================================

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol


class DocumentStore(Protocol):

    async def estimate_count(self) -> int:
        ...

    def sample(
        self,
        size: int,
        query: Optional[Dict[str, Any]] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        ...

    def run_aggregation(
        self,
        pipeline: List[Dict[str, Any]],
        cancel_event: Optional[asyncio.Event] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        ...

# ==============================================
# SchemaInference - Final Orchestrator
# ==============================================
#
# PURPOSE:
#   This is the MAIN CLASS that ties all 4 topics together into
#   one run: sample a collection, extract shapes, fold them into a
#   field → types mapping. Users interact with this class only.
#
# HOW IT CONNECTS THE 4 TOPICS:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                     SchemaInference                      │
#   │                                                          │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 1: SAMPLING                            │        │
#   │  │  size_sample → sample()                      │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ raw documents (streamed)               │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 2: EXTRACTION                          │        │
#   │  │  TypeDetector.extract_shape                  │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ shapes + running key set               │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 3: AGGREGATION                         │        │
#   │  │  complete → dedupe → aggregate_types         │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 ▼                                        │
#   │            SchemaAggregate                               │
#   │                                                          │
#   │  server_side=True replaces topics 2–3 with TOPIC 4:      │
#   │  build_schema_pipeline → run_aggregation → merge stream  │
#   └──────────────────────────────────────────────────────────┘
#
# CLASS: SchemaInference
# ----------------------
#   Constructor:
#   ------------
#   - __init__(store: DocumentStore, config: AppConfig | None = None)
#
#   Public Methods:
#   ---------------
#   - async infer(cancel_event=None) -> InferenceResult
#       Local or server-side depending on config.sampling.server_side.
#
# FUNCTIONS:
# ----------
#   - fold_shapes(shapes, global_keys) -> (SchemaAggregate, distinct count)
#   - infer_schema(documents) -> SchemaAggregate
#       Synchronous, in-memory run over already-fetched documents.
#
# ==============================================

import asyncio
import time
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set, Tuple

from schema_sampler.config import AppConfig, get_config
from schema_sampler.errors import (
    DataSourceError,
    InferenceCancelled,
    MalformedDocumentError,
    SchemaSamplerError,
)
from schema_sampler.extraction import DocumentShape, TypeDetector
from schema_sampler.sampling import Sampler
from schema_sampler.aggregation import (
    SchemaAggregate,
    aggregate_types,
    complete_shape,
    deduplicate_shapes,
    merge_result_stream,
    union_keys,
)
from schema_sampler.storage.document_store import DocumentStore
from schema_sampler.storage.aggregation_pipeline import build_schema_pipeline


@dataclass
class InferenceResult:
    """Outcome of one inference run."""

    aggregate: SchemaAggregate
    document_count: int  # Estimated collection size used for sizing
    sample_size: int
    documents_sampled: int = 0  # Not known for server-side runs
    malformed_documents: int = 0
    distinct_shapes: int = 0  # Not known for server-side runs
    server_side: bool = False
    timings: Dict[str, float] = field(default_factory=dict)  # Seconds per phase

    @property
    def global_keys(self) -> FrozenSet[str]:
        return self.aggregate.fields

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": self.aggregate.to_records(),
            "document_count": self.document_count,
            "sample_size": self.sample_size,
            "documents_sampled": self.documents_sampled,
            "malformed_documents": self.malformed_documents,
            "distinct_shapes": self.distinct_shapes,
            "server_side": self.server_side,
            "timings": {name: round(seconds, 4) for name, seconds in self.timings.items()},
        }


def fold_shapes(
    shapes: Iterable[DocumentShape],
    global_keys: FrozenSet[str]
) -> Tuple[SchemaAggregate, int]:
    """
    Folding phase: complete every shape, dedupe, aggregate.

    Args:
        shapes: All extracted shapes of the sample
        global_keys: Frozen union of their fields

    Returns:
        (aggregate, number of distinct completed shapes)
    """
    completed = (complete_shape(shape, global_keys) for shape in shapes)
    distinct = deduplicate_shapes(completed)
    return aggregate_types(distinct), len(distinct)


def infer_schema(documents: Iterable[Any]) -> SchemaAggregate:
    """
    Run the whole local pipeline over documents already in memory.

    Malformed documents count as empty shapes.
    """
    shapes: Set[DocumentShape] = set()
    keys: FrozenSet[str] = frozenset()
    for document in documents:
        try:
            shape = TypeDetector.extract_shape(document)
        except MalformedDocumentError:
            shape = frozenset()
        shapes.add(shape)
        keys = union_keys(keys, shape)
    aggregate, _ = fold_shapes(shapes, keys)
    return aggregate


class SchemaInference:
    """
    Main orchestrator: sample a collection and infer its top-level schema.
    """

    def __init__(self, store: DocumentStore, config: Optional[AppConfig] = None):
        """
        Args:
            store: Document store to sample from
            config: Application configuration. If None, loads from environment.
        """
        self._config = config or get_config()
        self._store = store
        self._sampler = Sampler(
            store,
            default_sample_size=self._config.sampling.default_sample_size,
            query=self._config.sampling.query
        )
        self._verbose = self._config.verbose

    def _log(self, message: str) -> None:
        if self._verbose:
            print(message)

    async def infer(self, cancel_event: Optional[asyncio.Event] = None) -> InferenceResult:
        """
        Infer the schema of the configured collection.

        Args:
            cancel_event: External cancellation signal. Once set, no
                further batches are requested from the store.

        Returns:
            InferenceResult holding the SchemaAggregate and run statistics

        Raises:
            DataSourceError: If counting, sampling or the aggregation fails
            InferenceCancelled: If cancel_event was set during the run
        """
        start = time.perf_counter()
        self._check_cancelled(cancel_event)

        document_count, sample_size = await self._sampler.size_sample()
        self._log(f"Estimated {document_count} documents → sample size {sample_size}")

        timings = {"pre_query": time.perf_counter() - start}

        if self._config.sampling.server_side:
            result = await self._infer_server_side(document_count, sample_size, cancel_event, timings)
        else:
            result = await self._infer_locally(document_count, sample_size, cancel_event, timings)

        result.timings["total"] = time.perf_counter() - start
        self._log(f"✓ Inferred {len(result.aggregate)} fields in {result.timings['total']:.2f}s")
        return result

    async def _infer_locally(
        self,
        document_count: int,
        sample_size: int,
        cancel_event: Optional[asyncio.Event],
        timings: Dict[str, float]
    ) -> InferenceResult:
        # Streaming phase: distinct raw shapes + running key set.
        # Completion depends on the shape alone, so equal raw shapes
        # complete to equal shapes and one copy is enough.
        phase_start = time.perf_counter()
        shapes: Set[DocumentShape] = set()
        keys: FrozenSet[str] = frozenset()
        sampled = 0
        malformed = 0

        async with aclosing(self._sampler.sample(sample_size, cancel_event)) as documents:
            async for document in documents:
                try:
                    shape = TypeDetector.extract_shape(document)
                except MalformedDocumentError as e:
                    malformed += 1
                    self._log(f"⚠ Malformed document treated as empty shape: {e}")
                    shape = frozenset()
                sampled += 1
                shapes.add(shape)
                keys = union_keys(keys, shape)

        self._check_cancelled(cancel_event)
        timings["query"] = time.perf_counter() - phase_start
        self._log(f"   → Sampled {sampled} documents, {len(keys)} distinct fields")

        # Folding phase: key set is frozen from here on
        phase_start = time.perf_counter()
        aggregate, distinct = fold_shapes(shapes, keys)
        timings["post_query"] = time.perf_counter() - phase_start
        self._log(f"   → {distinct} distinct shapes")

        return InferenceResult(
            aggregate=aggregate,
            document_count=document_count,
            sample_size=sample_size,
            documents_sampled=sampled,
            malformed_documents=malformed,
            distinct_shapes=distinct,
            server_side=False,
            timings=timings
        )

    async def _infer_server_side(
        self,
        document_count: int,
        sample_size: int,
        cancel_event: Optional[asyncio.Event],
        timings: Dict[str, float]
    ) -> InferenceResult:
        pipeline = build_schema_pipeline(
            sample_size,
            query=self._config.sampling.query,
            group_results=self._config.sampling.group_results
        )

        phase_start = time.perf_counter()
        try:
            async with aclosing(self._store.run_aggregation(pipeline, cancel_event)) as stream:
                aggregate = await merge_result_stream(stream, cancel_event)
        except SchemaSamplerError:
            raise
        except Exception as e:
            raise DataSourceError(f"Server-side aggregation failed: {e}") from e
        timings["query"] = time.perf_counter() - phase_start
        self._log(f"   → Merged server-side results for {len(aggregate)} fields")

        return InferenceResult(
            aggregate=aggregate,
            document_count=document_count,
            sample_size=sample_size,
            server_side=True,
            timings=timings
        )

    @staticmethod
    def _check_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise InferenceCancelled("Schema inference cancelled")

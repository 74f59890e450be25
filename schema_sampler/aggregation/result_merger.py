# ==============================================
# Result Merger
# ==============================================
#
# PURPOSE:
#   Combine partial results streamed back from the store into one
#   SchemaAggregate.
#
# WHY THIS FILE EXISTS:
#   An aggregation cursor hands results back in batches. If one
#   field's types are split across two batches, inserting each
#   batch over the previous one silently loses the earlier types.
#   Every batch is therefore unioned in via SchemaAggregate.merge().
#
# ACCEPTED RECORD LAYOUTS:
# ------------------------
#   Grouped:    {"schema": [{"field": "a", "types": ["int", ...]}, ...]}
#   Per field:  {"_id": "a", "types": ["int", ...]}
#               {"field": "a", "types": ["int", ...]}
#
#   Type names may be canonical ("integer") or MongoDB `$type`
#   names ("int", "long"); both map onto TypeTag.
#
# FUNCTIONS:
# ----------
# - parse_partial_result(record) -> SchemaAggregate
#     Raises DataSourceError for any record not in a layout above.
# - merge_results(aggregates) -> SchemaAggregate
# - merge_result_stream(stream, cancel_event=None) -> SchemaAggregate  (async)
#
# ==============================================

import asyncio
from collections.abc import Mapping
from functools import reduce
from typing import Any, AsyncIterator, Iterable, Optional

from schema_sampler.errors import DataSourceError, InferenceCancelled
from schema_sampler.extraction import TypeTag
from .schema_aggregate import SchemaAggregate


def _parse_field_entry(entry: Any, field_key: str) -> SchemaAggregate:
    if not isinstance(entry, Mapping):
        raise DataSourceError(f"Malformed schema entry: {entry!r}")

    field_name = entry.get(field_key)
    types = entry.get("types")
    if not isinstance(field_name, str):
        raise DataSourceError(f"Schema entry has no string '{field_key}': {entry!r}")
    if not isinstance(types, (list, tuple)) or not all(isinstance(t, str) for t in types):
        raise DataSourceError(f"Schema entry for '{field_name}' has no list of type names")

    return SchemaAggregate(types={
        field_name: frozenset(TypeTag.from_name(t) for t in types)
    })


def parse_partial_result(record: Any) -> SchemaAggregate:
    """
    Turn one streamed record into a SchemaAggregate.

    Args:
        record: One document from the aggregation cursor

    Returns:
        The types carried by this record

    Raises:
        DataSourceError: If the record matches none of the known layouts
    """
    if not isinstance(record, Mapping):
        raise DataSourceError(f"Partial result is not a document: {record!r}")

    if "schema" in record:
        entries = record["schema"]
        if not isinstance(entries, (list, tuple)):
            raise DataSourceError("Partial result 'schema' is not an array")
        return merge_results(_parse_field_entry(entry, "field") for entry in entries)

    if "field" in record:
        return _parse_field_entry(record, "field")

    if "_id" in record:
        return _parse_field_entry(record, "_id")

    raise DataSourceError(f"Unrecognized partial result: {sorted(record)}")


def merge_results(aggregates: Iterable[SchemaAggregate]) -> SchemaAggregate:
    """Union any number of aggregates; order does not matter."""
    return reduce(SchemaAggregate.merge, aggregates, SchemaAggregate())


async def merge_result_stream(
    stream: AsyncIterator[Any],
    cancel_event: Optional[asyncio.Event] = None
) -> SchemaAggregate:
    """
    Consume a stream of partial results and union them.

    Args:
        stream: Async iterator of result records
        cancel_event: Stop consuming when set

    Returns:
        The merged SchemaAggregate

    Raises:
        DataSourceError: On a malformed record
        InferenceCancelled: If cancel_event is set mid-stream
    """
    aggregate = SchemaAggregate()
    async for record in stream:
        if cancel_event is not None and cancel_event.is_set():
            raise InferenceCancelled("Result stream cancelled")
        aggregate = aggregate.merge(parse_partial_result(record))
    return aggregate

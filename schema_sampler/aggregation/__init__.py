# ==============================================
# TOPIC 3: AGGREGATION
# ==============================================
#
# This package folds the per-document shapes of a sample into
# one field → set-of-types mapping.
#
# Two phases:
#   Streaming:  every shape is folded into the global key set
#   Folding:    with the key set frozen, complete → dedupe → aggregate
#
# Modules:
# --------
# - key_unifier.py       → Union of field names over all shapes
# - shape_completer.py   → Fill absent keys with MISSING, dedupe shapes
# - schema_aggregate.py  → The field → types result value
# - type_aggregator.py   → Group distinct shapes by field
# - result_merger.py     → Union-merge partial results from a stream
#
# ==============================================

from .key_unifier import union_keys, unify_keys, fields_of
from .shape_completer import complete_shape, verify_completed, deduplicate_shapes
from .schema_aggregate import SchemaAggregate
from .type_aggregator import aggregate_types
from .result_merger import parse_partial_result, merge_results, merge_result_stream

__all__ = [
    "union_keys",
    "unify_keys",
    "fields_of",
    "complete_shape",
    "verify_completed",
    "deduplicate_shapes",
    "SchemaAggregate",
    "aggregate_types",
    "parse_partial_result",
    "merge_results",
    "merge_result_stream",
]

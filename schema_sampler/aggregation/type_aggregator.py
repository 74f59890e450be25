# ==============================================
# Type Aggregator
# ==============================================
#
# PURPOSE:
#   Flatten the distinct completed shapes into their (field, type)
#   pairs and group them by field.
#
# FUNCTION:
# ---------
# - aggregate_types(distinct_shapes) -> SchemaAggregate
#     Each distinct shape contributes each of its pairs once, no
#     matter how many documents shared it, so the result holds
#     which types occur per field and nothing about frequency.
#
# ==============================================

from collections import defaultdict
from typing import Dict, Iterable, Set

from schema_sampler.extraction import DocumentShape, TypeTag
from .schema_aggregate import SchemaAggregate


def aggregate_types(distinct_shapes: Iterable[DocumentShape]) -> SchemaAggregate:
    """
    Group (field, type) pairs of the distinct shapes by field.

    Args:
        distinct_shapes: Deduplicated, completed shapes

    Returns:
        SchemaAggregate with one entry per field seen in any shape
    """
    grouped: Dict[str, Set[TypeTag]] = defaultdict(set)
    for shape in distinct_shapes:
        for field_name, type_tag in shape:
            grouped[field_name].add(type_tag)

    return SchemaAggregate(types={
        field_name: frozenset(tags) for field_name, tags in grouped.items()
    })

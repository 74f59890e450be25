# ==============================================
# Shape Completer + Deduplicator
# ==============================================
#
# PURPOSE:
#   Outer-join every shape against the frozen global key set so
#   each one names every field, then collapse identical shapes.
#
# FUNCTIONS:
# ----------
# - complete_shape(shape, global_keys) -> DocumentShape
#     Adds (key, MISSING) for each global key the shape lacks.
#     Already-complete shapes come back unchanged.
#
# - verify_completed(shape, global_keys) -> None
#     Raises SchemaInvariantViolation unless the shape holds exactly
#     one pair per global key and nothing else.
#
# - deduplicate_shapes(shapes) -> frozenset[DocumentShape]
#     Distinct completed shapes. Real collections have far fewer
#     shapes than documents, so everything downstream is bounded by
#     the number of distinct shapes rather than the sample size.
#
# ==============================================

from typing import FrozenSet, Iterable

from schema_sampler.errors import SchemaInvariantViolation
from schema_sampler.extraction import DocumentShape, TypeTag
from .key_unifier import fields_of


def complete_shape(shape: DocumentShape, global_keys: FrozenSet[str]) -> DocumentShape:
    """
    Fill a shape with a MISSING pair for every global key it lacks.

    Args:
        shape: One document's (field, type) pairs
        global_keys: The frozen union of all fields in the sample

    Returns:
        The completed shape

    Raises:
        SchemaInvariantViolation: If the shape carries a field outside
            global_keys or more than one pair for the same field
    """
    absent = global_keys - fields_of(shape)
    completed = shape | frozenset((key, TypeTag.MISSING) for key in absent)
    verify_completed(completed, global_keys)
    return completed


def verify_completed(shape: DocumentShape, global_keys: FrozenSet[str]) -> None:
    if len(shape) != len(global_keys) or fields_of(shape) != global_keys:
        raise SchemaInvariantViolation(
            f"Completed shape has {len(shape)} pairs over "
            f"{len(fields_of(shape))} fields, expected {len(global_keys)}"
        )


def deduplicate_shapes(shapes: Iterable[DocumentShape]) -> FrozenSet[DocumentShape]:
    """Collapse structurally identical shapes (same set of pairs)."""
    return frozenset(shapes)

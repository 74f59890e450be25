# ==============================================
# Key Unifier
# ==============================================
#
# PURPOSE:
#   Build the global key set: the union of field names over
#   every shape extracted from the sample.
#
# WHY THIS IS A FOLD:
#   Set union is commutative and associative, so the result does
#   not depend on the order documents arrive in, and partial key
#   sets built by separate workers can be combined the same way.
#   The accumulator is returned, never mutated.
#
# FUNCTIONS:
# ----------
# - fields_of(shape) -> frozenset[str]
# - union_keys(keys, shape) -> frozenset[str]     (one fold step)
# - unify_keys(shapes, initial=frozenset()) -> frozenset[str]
#
# ==============================================

from functools import reduce
from typing import FrozenSet, Iterable

from schema_sampler.extraction import DocumentShape


def fields_of(shape: DocumentShape) -> FrozenSet[str]:
    """Field names present in a shape."""
    return frozenset(field for field, _ in shape)


def union_keys(keys: FrozenSet[str], shape: DocumentShape) -> FrozenSet[str]:
    """Fold one shape into the running key set."""
    return keys | fields_of(shape)


def unify_keys(
    shapes: Iterable[DocumentShape],
    initial: FrozenSet[str] = frozenset()
) -> FrozenSet[str]:
    """
    Union of field names over every shape.

    Args:
        shapes: All shapes of the sample (must be complete before the
                result is used for completion)
        initial: Key set to start from, e.g. one built by another worker

    Returns:
        The global key set
    """
    return reduce(union_keys, shapes, frozenset(initial))

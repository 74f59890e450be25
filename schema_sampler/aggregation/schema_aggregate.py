# ==============================================
# SchemaAggregate
# ==============================================
#
# PURPOSE:
#   The one artifact a run produces: for each field name, the set
#   of canonical types observed for it (MISSING included when some
#   distinct shape lacks the field).
#
# WHY THIS CLASS EXISTS:
#   Local runs, server-side runs and partial result batches all
#   produce the same value, and all of them are combined the same
#   way: a per-field set union. Keeping that union in one place
#   means no caller can accidentally overwrite a field's types.
#
# CLASS: SchemaAggregate (frozen dataclass)
# -----------------------------------------
#   Attributes:
#   -----------
#   - types: read-only mapping str -> frozenset[TypeTag]
#     (copied on construction; aggregates are hashable)
#
#   Methods:
#   --------
#   - fields -> frozenset[str]        (the global key set)
#   - merge(other) -> SchemaAggregate (per-field union; idempotent, commutative)
#   - to_records() -> list[dict]      ([{"field": ..., "types": [...]}, ...])
#   - from_records(records) -> SchemaAggregate  (classmethod)
#   - to_dict() -> dict               ({field: [type, ...]})
#
# NOTE:
#   The aggregate answers "which types occur", never "how often".
#   Shapes are deduplicated before aggregation, so frequency is
#   discarded on purpose.
#
# ==============================================

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping

from schema_sampler.extraction import TypeTag


@dataclass(frozen=True)
class SchemaAggregate:
    """Mapping from field name to the set of types observed for it."""

    types: Mapping[str, FrozenSet[TypeTag]] = field(default_factory=dict)

    def __post_init__(self):
        # Own a read-only copy so the caller's dict cannot change it later
        object.__setattr__(self, "types", MappingProxyType({
            field_name: frozenset(field_types) for field_name, field_types in self.types.items()
        }))

    def __hash__(self) -> int:
        return hash(frozenset(self.types.items()))

    @property
    def fields(self) -> FrozenSet[str]:
        return frozenset(self.types)

    def __getitem__(self, field_name: str) -> FrozenSet[TypeTag]:
        return self.types[field_name]

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.types

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.types))

    def __len__(self) -> int:
        return len(self.types)

    def get(self, field_name: str, default: FrozenSet[TypeTag] = frozenset()) -> FrozenSet[TypeTag]:
        return self.types.get(field_name, default)

    # ======================================
    # Merging
    # ======================================
    def merge(self, other: "SchemaAggregate") -> "SchemaAggregate":
        """
        Union the type sets of two aggregates field by field.

        A field present in both keeps every type from both sides;
        nothing is ever overwritten.

        Args:
            other: Aggregate to combine with this one

        Returns:
            A new SchemaAggregate; neither input is modified
        """
        merged: Dict[str, FrozenSet[TypeTag]] = dict(self.types)
        for field_name, field_types in other.types.items():
            merged[field_name] = merged.get(field_name, frozenset()) | field_types
        return SchemaAggregate(types=merged)

    # ======================================
    # Serialization
    # ======================================
    def to_records(self) -> List[Dict[str, Any]]:
        """
        One record per field, fields and types sorted for stable output.

        Returns:
            [{"field": "a", "types": ["integer", "missing"]}, ...]
        """
        return [
            {"field": field_name, "types": sorted(str(t) for t in self.types[field_name])}
            for field_name in sorted(self.types)
        ]

    def to_dict(self) -> Dict[str, List[str]]:
        """Serialize as {field: [type, ...]}."""
        return {record["field"]: record["types"] for record in self.to_records()}

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "SchemaAggregate":
        """
        Rebuild an aggregate from to_records() output.

        Repeated fields are unioned, not replaced.
        """
        aggregate = cls()
        for record in records:
            aggregate = aggregate.merge(cls(types={
                record["field"]: frozenset(TypeTag.from_name(t) for t in record["types"])
            }))
        return aggregate

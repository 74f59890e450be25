# ==============================================
# TypeTag (Enum)
# ==============================================
#
# PURPOSE:
#   The closed, canonical set of type names a field can carry.
#   Every value maps to exactly one tag; anything unrecognized
#   becomes OTHER.
#
# NOTES:
# ------
# - MISSING is synthetic. It marks a field absent from a document
#   and is never the type of an actual value.
# - from_server_name() maps the names MongoDB's `$type` operator
#   returns ("int", "long", "double", "objectId", ...) onto the
#   same set, so server-side and local runs agree.
#
# ==============================================

from enum import Enum
from typing import Dict


class TypeTag(Enum):
    """Canonical value types observed for a field."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"
    DATE = "date"
    BINARY = "binary"
    OBJECT_ID = "object-id"
    ARRAY = "array"
    OBJECT = "object"
    MISSING = "missing"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "TypeTag":
        """
        Accept either a canonical tag value or a MongoDB `$type` name.

        Args:
            name: "integer", "object-id", "long", "binData", ...

        Returns:
            The matching TypeTag, OTHER for names outside both sets
        """
        try:
            return cls(name)
        except ValueError:
            return cls.from_server_name(name)

    @classmethod
    def from_server_name(cls, name: str) -> "TypeTag":
        """Map a MongoDB `$type` result to its canonical tag."""
        return _SERVER_NAMES.get(name, cls.OTHER)


_SERVER_NAMES: Dict[str, TypeTag] = {
    "string": TypeTag.STRING,
    "int": TypeTag.INTEGER,
    "long": TypeTag.INTEGER,
    "double": TypeTag.FLOAT,
    "bool": TypeTag.BOOLEAN,
    "null": TypeTag.NULL,
    "undefined": TypeTag.NULL,
    "date": TypeTag.DATE,
    "binData": TypeTag.BINARY,
    "objectId": TypeTag.OBJECT_ID,
    "array": TypeTag.ARRAY,
    "object": TypeTag.OBJECT,
    "missing": TypeTag.MISSING,
}

# ==============================================
# TypeDetector
# ==============================================
#
# PURPOSE:
#   Map any value found at the top level of a document to a
#   TypeTag, and build the document's shape from those tags.
#
# CLASS: TypeDetector
# -------------------
#   Stateless - all methods are classmethods.
#
#   Methods:
#   --------
#   - detect(value: Any) -> TypeTag
#       Total: never raises, unknown kinds map to OTHER.
#       Agrees with TypeTag.from_server_name on every BSON kind.
#
#   - extract_shape(document: Mapping) -> DocumentShape
#       frozenset of (field, TypeTag), one pair per top-level key.
#       Raises MalformedDocumentError for a non-mapping document
#       or a non-string key.
#
# ==============================================

from datetime import datetime
from collections.abc import Mapping
from typing import Any, FrozenSet, Tuple

from bson import Code, DBRef, ObjectId
from bson.datetime_ms import DatetimeMS

from .type_tag import TypeTag
from schema_sampler.errors import MalformedDocumentError


FieldTypePair = Tuple[str, TypeTag]
DocumentShape = FrozenSet[FieldTypePair]


class TypeDetector:

    @classmethod
    def detect(cls, value: Any) -> TypeTag:
        if value is None:
            return TypeTag.NULL

        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return TypeTag.BOOLEAN

        # Covers bson.Int64
        if isinstance(value, int):
            return TypeTag.INTEGER

        if isinstance(value, float):
            return TypeTag.FLOAT

        # Code is a str subclass, but $type reports it as "javascript"
        if isinstance(value, Code):
            return TypeTag.OTHER

        if isinstance(value, str):
            return TypeTag.STRING

        if isinstance(value, (datetime, DatetimeMS)):
            return TypeTag.DATE

        # Covers bson.Binary
        if isinstance(value, (bytes, bytearray, memoryview)):
            return TypeTag.BINARY

        if isinstance(value, ObjectId):
            return TypeTag.OBJECT_ID

        if isinstance(value, (list, tuple)):
            return TypeTag.ARRAY

        # DBRef is stored as an embedded document, $type says "object"
        if isinstance(value, DBRef):
            return TypeTag.OBJECT

        # Covers SON and RawBSONDocument
        if isinstance(value, Mapping):
            return TypeTag.OBJECT

        return TypeTag.OTHER

    @classmethod
    def extract_shape(cls, document: Any) -> DocumentShape:
        """
        Build the shape of one raw document.

        Only top-level keys are inspected; nested values are reduced
        to their own tag (OBJECT, ARRAY).

        Args:
            document: A field → value mapping

        Returns:
            frozenset of (field, TypeTag) pairs

        Raises:
            MalformedDocumentError: If the document is not a mapping or
                has a non-string key
        """
        if not isinstance(document, Mapping):
            raise MalformedDocumentError(
                f"Expected a mapping, got {type(document).__name__}"
            )

        pairs = []
        for key, value in document.items():
            if not isinstance(key, str):
                raise MalformedDocumentError(f"Field name {key!r} is not a string")
            pairs.append((key, cls.detect(value)))

        return frozenset(pairs)

# ==============================================
# TOPIC 2: TYPE EXTRACTION
# ==============================================
#
# This package turns one raw document into its shape:
# the set of (field, type) pairs of its top-level keys.
#
# Modules:
# --------
# - type_tag.py      → Closed set of canonical type tags
# - type_detector.py → Map native/BSON values to tags, extract shapes
#
# ==============================================

from .type_tag import TypeTag
from .type_detector import TypeDetector, DocumentShape, FieldTypePair

__all__ = ["TypeTag", "TypeDetector", "DocumentShape", "FieldTypePair"]

# ==============================================
# TOPIC 4: STORAGE (MongoDB)
# ==============================================
#
# This package is the boundary to the document store: the
# operations the core consumes, their MongoDB implementation,
# and the pipeline that runs the whole inference server-side.
#
# Modules:
# --------
# - document_store.py        → DocumentStore protocol
# - mongo_client.py          → MongoDB implementation (pymongo asyncio API)
# - aggregation_pipeline.py  → Server-side schema pipeline builder
#
# ==============================================

from .document_store import DocumentStore
from .mongo_client import MongoDocumentStore
from .aggregation_pipeline import build_schema_pipeline

__all__ = [
    "DocumentStore",
    "MongoDocumentStore",
    "build_schema_pipeline"
]

# ==============================================
# MongoDocumentStore
# ==============================================
#
# PURPOSE:
#   Manages the MongoDB connection and implements the DocumentStore
#   operations the inference core needs: an estimated count, a random
#   sample, and a server-side aggregation.
#
# CLASS: MongoDocumentStore
# -------------------------
#   Stateful - holds an AsyncMongoClient.
#
#   Constructor:
#   ------------
#   - __init__(uri, database, collection, verbose=True)
#   - from_config(config: MongoConfig, verbose=True)  (classmethod)
#
#   Methods:
#   --------
#   - connect() -> None            (async, pings the server)
#   - disconnect() -> None         (async)
#   - estimate_count() -> int      (async)
#   - sample(size, query=None, cancel_event=None) -> AsyncIterator[dict]
#   - run_aggregation(pipeline, cancel_event=None) -> AsyncIterator[dict]
#
#   Context Manager:
#   ----------------
#   - __aenter__ / __aexit__ for `async with MongoDocumentStore(...) as store:`
#
# ERRORS:
#   Every PyMongoError is re-raised as DataSourceError. Nothing is
#   retried here.
#
# CANCELLATION:
#   Cursors are pulled one document at a time. The cancel event is
#   checked before each pull, so once it is set no further getMore
#   is issued; the cursor is closed and InferenceCancelled raised.
#
# ==============================================

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional

from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from schema_sampler.config import MongoConfig
from schema_sampler.errors import DataSourceError, InferenceCancelled


class MongoDocumentStore:
    def __init__(self, uri: str, database: str, collection: str, verbose: bool = True):
        # Store connection params. Don't connect yet.
        self.uri = uri
        self.database = database
        self.collection = collection
        self.verbose = verbose
        self.client: Optional[AsyncMongoClient] = None

    @classmethod
    def from_config(cls, config: MongoConfig, verbose: bool = True) -> "MongoDocumentStore":
        if not config.collection:
            raise DataSourceError("No collection configured (set MONGO_COLLECTION or --collection)")
        return cls(
            uri=config.connection_uri(),
            database=config.database,
            collection=config.collection,
            verbose=verbose
        )

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    async def connect(self) -> None:
        # Establish connection to MongoDB.
        try:
            self.client = AsyncMongoClient(self.uri)
            # Test connection
            await self.client.admin.command("ping")
            self._log("Connected to MongoDB successfully.")
        except ConnectionFailure as e:
            await self.disconnect()
            raise DataSourceError(f"Could not connect to MongoDB: {e}") from e
        except OperationFailure as e:
            await self.disconnect()
            raise DataSourceError(f"Authentication failed: {e}") from e
        except PyMongoError as e:
            await self.disconnect()
            raise DataSourceError(f"MongoDB error while connecting: {e}") from e

    async def disconnect(self) -> None:
        # Close connection.
        if self.client:
            await self.client.close()
            self._log("Disconnected from MongoDB.")
            self.client = None

    def _collection(self):
        if not self.client:
            raise DataSourceError("Not connected to MongoDB.")
        return self.client[self.database][self.collection]

    async def estimate_count(self) -> int:
        # Metadata-based count; may be stale, which is fine for sizing.
        collection = self._collection()
        try:
            return await collection.estimated_document_count()
        except PyMongoError as e:
            raise DataSourceError(f"Estimated count on '{self.collection}' failed: {e}") from e

    def sample(
        self,
        size: int,
        query: Optional[Dict[str, Any]] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        # $sample may return duplicates when size approaches the collection size.
        pipeline: List[Dict[str, Any]] = []
        if query:
            pipeline.append({"$match": query})
        pipeline.append({"$sample": {"size": size}})
        return self._stream(pipeline, cancel_event, "Sampling")

    def run_aggregation(
        self,
        pipeline: List[Dict[str, Any]],
        cancel_event: Optional[asyncio.Event] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        return self._stream(pipeline, cancel_event, "Aggregation")

    async def _stream(
        self,
        pipeline: List[Dict[str, Any]],
        cancel_event: Optional[asyncio.Event],
        operation: str
    ) -> AsyncIterator[Dict[str, Any]]:
        collection = self._collection()
        try:
            cursor = await collection.aggregate(pipeline, allowDiskUse=True)
        except PyMongoError as e:
            raise DataSourceError(f"{operation} on '{self.collection}' failed: {e}") from e

        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise InferenceCancelled(f"{operation} on '{self.collection}' cancelled")
                try:
                    document = await anext(cursor)
                except StopAsyncIteration:
                    break
                except PyMongoError as e:
                    raise DataSourceError(f"{operation} on '{self.collection}' failed: {e}") from e
                yield document
        finally:
            await cursor.close()

    async def __aenter__(self) -> "MongoDocumentStore":
        # For `async with MongoDocumentStore(...) as store:` usage.
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

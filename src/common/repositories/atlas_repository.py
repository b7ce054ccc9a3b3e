"""
MongoDB Analysis Repository

pymongo implementation of AnalysisRepositoryInterface. The MongoClient is
owned by the repository instance (which in turn is owned by
AnalysisRepositoryProvider); there is no module-level client.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from src.common.error_handling import pipeline_operation

from .base import AnalysisRepositoryInterface, WriteResult

logger = logging.getLogger(__name__)

# Mongoose-era documents carry a version key; never return it
EXCLUDED_FIELDS = {"__v": 0}


@pipeline_operation("MongoDB create index", layer="persist", log_success=False)
def _create_index(collection: Collection, keys: List[Any], name: str) -> None:
    collection.create_index(keys, name=name)


def _serialize(document: Dict[str, Any]) -> Dict[str, Any]:
    """Make a document JSON friendly: stringify _id."""
    if "_id" in document:
        document["_id"] = str(document["_id"])
    return document


class AtlasAnalysisRepository(AnalysisRepositoryInterface):
    """
    MongoDB-backed analysis repository.

    Connection Management:
    - connect() creates the MongoClient and verifies it with a ping
    - PyMongo pools connections internally and is thread-safe, so one
      instance is shared by all requests in the process
    - close() releases the pool; the provider calls it on connection errors
    """

    def __init__(
        self,
        mongodb_uri: str,
        database: str = "ctc_estimator",
        collection: str = "analyses",
        timeout_ms: int = 5000,
    ):
        """
        Initialize the repository with connection parameters.

        Args:
            mongodb_uri: MongoDB connection string
            database: Database name
            collection: Collection name
            timeout_ms: Server selection / connect timeout in milliseconds
        """
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._collection_name = collection
        self._timeout_ms = timeout_ms
        self._client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None

    def connect(self) -> None:
        """
        Open the client and verify the server is reachable.

        Raises:
            pymongo.errors.PyMongoError: If the server cannot be reached
        """
        client = MongoClient(
            self._mongodb_uri,
            serverSelectionTimeoutMS=self._timeout_ms,
            connectTimeoutMS=self._timeout_ms,
        )
        try:
            client.admin.command("ping")
        except Exception:
            client.close()
            raise
        self._client = client
        self._collection = client[self._database_name][self._collection_name]
        logger.info(f"MongoDB connected: {self._database_name}.{self._collection_name}")

    def close(self) -> None:
        """Close the client if open."""
        if self._client is not None:
            self._client.close()
        self._client = None
        self._collection = None

    def _get_collection(self) -> Collection:
        if self._collection is None:
            raise RuntimeError("Analysis repository not connected. Call connect() first.")
        return self._collection

    def ensure_indexes(self) -> None:
        """Create the history indexes; safe to call repeatedly."""
        collection = self._get_collection()
        indexes = [
            ("githubUsername_1", [("githubUsername", ASCENDING)]),
            ("githubUsername_1_createdAt_-1", [("githubUsername", ASCENDING), ("createdAt", DESCENDING)]),
        ]
        for name, keys in indexes:
            _create_index(collection, keys, name)

    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        collection = self._get_collection()
        result = collection.insert_one(document)
        return WriteResult(
            inserted_id=str(result.inserted_id) if result.inserted_id else None,
            acknowledged=result.acknowledged,
        )

    def find_by_username(self, github_username: str, limit: int = 10) -> List[Dict[str, Any]]:
        collection = self._get_collection()
        cursor = (
            collection.find({"githubUsername": github_username}, EXCLUDED_FIELDS)
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        return [_serialize(doc) for doc in cursor]

    def find_recent(self, limit: int = 100) -> List[Dict[str, Any]]:
        collection = self._get_collection()
        cursor = collection.find({}, EXCLUDED_FIELDS).sort("createdAt", DESCENDING).limit(limit)
        return [_serialize(doc) for doc in cursor]

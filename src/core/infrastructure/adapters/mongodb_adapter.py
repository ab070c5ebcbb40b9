"""Thin MongoDB adapter wrapping pymongo collection operations."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Protocol

from aws_lambda_powertools import Logger
from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from core.utils.constants import DEFAULT_MONGO_DB_NAME, ENV_MONGO_URI
from core.utils.settings import (
    get_mongo_collection_name,
    get_mongo_db_name,
    get_mongo_timeout_ms,
    require_env,
)

logger = Logger(UTC=True)

Document = dict[str, Any]


class MongoDBConnection:
    """Process-wide MongoDB client with an explicit connect/is_ready lifecycle.

    The client is created once, on first use, behind a lock so concurrent
    requests never race to open their own connection. pymongo's client is
    thread-safe and pools sockets internally.
    """

    def __init__(self, client_factory: Callable[..., MongoClient] = MongoClient) -> None:
        self._client_factory = client_factory
        self._client: MongoClient | None = None
        self._lock = threading.Lock()

    def connect(self) -> MongoClient:
        """Return the shared client, creating it on the first call."""
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is None:
                uri = require_env(ENV_MONGO_URI)
                timeout_ms = get_mongo_timeout_ms()
                self._client = self._client_factory(
                    uri,
                    tz_aware=True,
                    serverSelectionTimeoutMS=timeout_ms,
                    connectTimeoutMS=timeout_ms,
                    socketTimeoutMS=timeout_ms,
                )
                logger.info("MongoDB client initialized")

        return self._client

    def is_ready(self) -> bool:
        return self._client is not None

    def database(self) -> Database:
        client = self.connect()
        name = get_mongo_db_name()
        if name:
            return client[name]
        return client.get_default_database(default=DEFAULT_MONGO_DB_NAME)

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
                logger.info("MongoDB client closed")


shared_connection = MongoDBConnection()


class MongoDBAdapterProtocol(Protocol):
    """Minimal MongoDB adapter protocol (repository-facing)."""

    def insert_one(self, *, document: Document) -> Any: ...
    def find_one(self, *, query: Document) -> Document | None: ...
    def find_sorted(self, *, sort_field: str) -> list[Document]: ...
    def delete_one(self, *, query: Document) -> int: ...


class MongoDBAdapter:
    """Low-level MongoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps a pymongo collection from the shared connection
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, connection: MongoDBConnection | None = None) -> None:
        self._connection = connection or shared_connection

    @property
    def collection(self) -> Collection:
        return self._connection.database()[get_mongo_collection_name()]

    def insert_one(self, *, document: Document) -> Any:
        """Insert a document and return its generated ``_id``."""
        return self.collection.insert_one(document).inserted_id

    def find_one(self, *, query: Document) -> Document | None:
        return self.collection.find_one(query)

    def find_sorted(self, *, sort_field: str) -> list[Document]:
        """Return all documents, newest first by ``sort_field``."""
        return list(self.collection.find().sort(sort_field, DESCENDING))

    def delete_one(self, *, query: Document) -> int:
        return self.collection.delete_one(query).deleted_count

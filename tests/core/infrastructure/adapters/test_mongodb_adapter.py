import threading
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from core.infrastructure.adapters.mongodb_adapter import MongoDBAdapter, MongoDBConnection
from core.models.errors import ConfigurationError


class TestMongoDBConnection:
    def test_connect_is_single_flight(self) -> None:
        factory = MagicMock()
        connection = MongoDBConnection(client_factory=factory)

        threads = [threading.Thread(target=connection.connect) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        factory.assert_called_once()
        assert connection.is_ready()

    def test_connect_passes_timeouts(self, monkeypatch) -> None:
        monkeypatch.setenv("MONGO_TIMEOUT_MS", "2500")
        factory = MagicMock()

        MongoDBConnection(client_factory=factory).connect()

        args, kwargs = factory.call_args
        assert args == ("mongodb://localhost:27017/image_catalog_test",)
        assert kwargs["tz_aware"] is True
        assert kwargs["serverSelectionTimeoutMS"] == 2500
        assert kwargs["socketTimeoutMS"] == 2500

    def test_missing_uri_raises(self, monkeypatch) -> None:
        monkeypatch.delenv("MONGO_URI", raising=False)
        connection = MongoDBConnection(client_factory=MagicMock())

        with pytest.raises(ConfigurationError):
            connection.connect()

        assert not connection.is_ready()

    def test_database_from_env(self) -> None:
        client = MagicMock()
        connection = MongoDBConnection(client_factory=lambda *a, **kw: client)

        connection.database()

        client.__getitem__.assert_called_once_with("image_catalog_test")

    def test_database_falls_back_to_uri_default(self, monkeypatch) -> None:
        monkeypatch.delenv("MONGO_DB_NAME", raising=False)
        client = MagicMock()
        connection = MongoDBConnection(client_factory=lambda *a, **kw: client)

        connection.database()

        client.get_default_database.assert_called_once_with(default="image_catalog")

    def test_close_resets_client(self) -> None:
        client = MagicMock()
        connection = MongoDBConnection(client_factory=lambda *a, **kw: client)
        connection.connect()

        connection.close()

        client.close.assert_called_once()
        assert not connection.is_ready()


class TestMongoDBAdapter:
    def test_uses_shared_connection(self, mongo_connection) -> None:
        adapter = MongoDBAdapter()

        inserted_id = adapter.insert_one(document={"originalFilename": "a.png"})

        assert isinstance(inserted_id, ObjectId)
        assert adapter.find_one(query={"_id": inserted_id})["originalFilename"] == "a.png"

    def test_find_sorted_is_descending(self, mongo_connection) -> None:
        adapter = MongoDBAdapter()
        for rank in (2, 3, 1):
            adapter.insert_one(document={"rank": rank})

        assert [doc["rank"] for doc in adapter.find_sorted(sort_field="rank")] == [3, 2, 1]

    def test_delete_one_returns_count(self, mongo_connection) -> None:
        adapter = MongoDBAdapter()
        inserted_id = adapter.insert_one(document={"x": 1})

        assert adapter.delete_one(query={"_id": inserted_id}) == 1
        assert adapter.delete_one(query={"_id": inserted_id}) == 0

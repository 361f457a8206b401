from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from pymongo.errors import AutoReconnect

from gateway.config import Settings
from gateway.services import mongo as mongo_service
from gateway.services.mongo import ClientManager


def test_mongo_uri_required(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    s = Settings(_env_file=None)
    assert s.mongo_uri == "mongodb://db:27017"
    assert (s.mongo_min_pool_size, s.mongo_max_pool_size) == (10, 500)
    assert (s.host, s.port) == ("127.0.0.1", 8080)
    assert s.mongo_app_name == "Titanico Instance"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("MONGO_MAX_POOL_SIZE", "50")
    s = Settings(_env_file=None)
    assert s.port == 9000
    assert s.mongo_max_pool_size == 50


def test_pool_bounds_validated():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, mongo_uri="mongodb://db", mongo_min_pool_size=20, mongo_max_pool_size=10)


def test_client_built_with_pool_bounds(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr(mongo_service, "MongoClient", fake)
    settings = Settings(_env_file=None, mongo_uri="mongodb://db:27017", mongo_app_name="tests")
    manager = ClientManager.from_settings(settings)
    fake.assert_called_once_with(
        "mongodb://db:27017", appname="tests", minPoolSize=10, maxPoolSize=500,
    )
    assert manager.client is fake.return_value


def test_ping():
    client = MagicMock()
    assert ClientManager(client).ping() is True
    client.admin.command.side_effect = AutoReconnect("down")
    assert ClientManager(client).ping() is False

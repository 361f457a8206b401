"""Shared fixtures: an in-memory stand-in for MongoClient, and an app wired to it."""

import copy
import os
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

# Settings must never pick up a real deployment during tests
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")

from gateway.main import create_app  # noqa: E402
from gateway.services.mongo import ClientManager  # noqa: E402


def _matches(doc, flt):
    return all(doc.get(k) == v for k, v in flt.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs
        self.limit_value = None

    def limit(self, n):
        self.limit_value = n
        self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    """Equality-filter collection supporting the calls the dispatcher makes."""

    def __init__(self):
        self.docs = []

    def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def find_one(self, flt):
        for doc in self.docs:
            if _matches(doc, flt):
                return copy.deepcopy(doc)
        return None

    def find(self, flt):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, flt)])

    def find_one_and_update(self, flt, update):
        if isinstance(update, dict) and not all(k.startswith("$") for k in update):
            raise ValueError("update only works with $ operators")
        for doc in self.docs:
            if _matches(doc, flt):
                before = copy.deepcopy(doc)
                doc.update(update.get("$set", {}))
                return before
        return None


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection())

    def command(self, name):
        return {"ok": 1}


class FakeMongoClient:
    def __init__(self):
        self._databases = {}
        self.admin = FakeDatabase()
        self.closed = False

    def __getitem__(self, name):
        return self._databases.setdefault(name, FakeDatabase())

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeMongoClient()


@pytest.fixture
def manager(fake_client):
    return ClientManager(fake_client)


@pytest.fixture
def client(manager):
    app = create_app(manager)
    with TestClient(app) as c:
        yield c

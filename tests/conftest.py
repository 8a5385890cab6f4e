"""
Shared fixtures: an in-memory Firestore double and REST clients on httpx.MockTransport.
"""

import itertools
from types import SimpleNamespace

import httpx
import pytest
from google.api_core.exceptions import NotFound, ServiceUnavailable

from dashboard_client.adapters.memory_token_store import MemoryTokenStore
from dashboard_client.config import ClientConfig
from dashboard_client.sdk.client import DashboardClient

API_BASE = "http://api.test/api"

_ids = itertools.count(1)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeQuery:
    """Just enough of the AsyncQuery surface: where/order_by/limit/count/get."""

    def __init__(self, db, collection, filters=(), order=None, limit=None):
        self._db = db
        self._collection_name = collection
        self._filters = tuple(filters)
        self._order = order
        self._limit = limit

    def _copy(self, **changes):
        state = {"filters": self._filters, "order": self._order, "limit": self._limit}
        state.update(changes)
        return FakeQuery(self._db, self._collection_name, **state)

    def where(self, filter=None):
        return self._copy(filters=self._filters + (filter,))

    def order_by(self, field_path, direction="ASCENDING"):
        return self._copy(order=(field_path, direction))

    def limit(self, count):
        return self._copy(limit=count)

    def count(self):
        query = self

        class _Count:
            async def get(self):
                return [[SimpleNamespace(alias="count", value=len(await query.get()))]]

        return _Count()

    async def get(self):
        self._db.read(self._collection_name)
        documents = list(self._db.data.get(self._collection_name, {}).items())

        for field_filter in self._filters:
            assert field_filter.op_string == "=="
            documents = [
                (doc_id, data) for doc_id, data in documents
                if data.get(field_filter.field_path) == field_filter.value
            ]

        if self._order:
            field_path, direction = self._order
            # Firestore leaves out documents without the ordered field
            documents = [(doc_id, data) for doc_id, data in documents if field_path in data]
            documents.sort(key=lambda item: item[1][field_path], reverse=direction == "DESCENDING")

        if self._limit is not None:
            documents = documents[:self._limit]

        return [FakeSnapshot(doc_id, data) for doc_id, data in documents]


class FakeDocument:
    def __init__(self, db, collection, doc_id):
        self._db = db
        self._collection_name = collection
        self.id = doc_id

    async def get(self):
        self._db.read(self._collection_name)
        return FakeSnapshot(self.id, self._db.data.get(self._collection_name, {}).get(self.id))

    async def set(self, data):
        self._db.data.setdefault(self._collection_name, {})[self.id] = dict(data)

    async def update(self, data):
        documents = self._db.data.get(self._collection_name, {})
        if self.id not in documents:
            raise NotFound(f"No document to update: {self._collection_name}/{self.id}")
        documents[self.id].update(data)


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocument(self._db, self._collection_name, doc_id or f"auto{next(_ids)}")


class FakeFirestore:
    """
    In-memory stand-in for google.cloud.firestore.AsyncClient.

    ``data`` maps collection -> document id -> fields.
    """

    def __init__(self, data=None):
        self.data = {name: dict(docs) for name, docs in (data or {}).items()}
        self.failures = {}
        self.reads = []

    def collection(self, name):
        return FakeCollection(self, name)

    def fail(self, collection, error=None):
        self.failures[collection] = error or ServiceUnavailable(f"{collection} unavailable")

    def read(self, collection):
        self.reads.append(collection)
        if collection in self.failures:
            raise self.failures[collection]


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def token_store():
    return MemoryTokenStore(access_token="old-access", refresh_token="refresh-1")


@pytest.fixture
def make_rest_client(token_store):
    """Factory: REST-mode DashboardClient whose HTTP traffic goes to ``handler``."""
    def factory(handler, store=None, on_logout=None):
        config = ClientConfig(api_base_url=API_BASE, host="admin.example.com", token_store="memory", logout_delay=0)
        return DashboardClient(
            config,
            token_store=store if store is not None else token_store,
            on_logout=on_logout,
            transport=httpx.MockTransport(handler),
        )
    return factory


@pytest.fixture
def make_store_client(fake_db):
    """Factory: direct-store DashboardClient backed by the fake Firestore."""
    def factory(db=None, window=500):
        config = ClientConfig(
            api_base_url=API_BASE,
            host="dashboard.web.app",
            token_store="memory",
            direct_store_window=window,
        )
        return DashboardClient(config, firestore_client=db if db is not None else fake_db)
    return factory

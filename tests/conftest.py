import uuid

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import Store
from main import app
from seed import seed


@pytest.fixture
def store():
    db = mongomock.MongoClient()[f"emporium_test_{uuid.uuid4().hex}"]
    store = Store(db)
    store.ensure_indexes()
    return store


@pytest.fixture
def catalog(store):
    return seed(store)


@pytest.fixture
def client(store):
    app.state.store = store
    return TestClient(app)


def make_product(store, **overrides):
    fields = {"name": "Linen Shirt", "sku": f"LS-{uuid.uuid4().hex[:6]}", "price": 10.0}
    fields.update(overrides)
    return store.create("product", fields)


def make_customer(store, **overrides):
    fields = {
        "firstName": "Ada",
        "lastName": "Byron",
        "email": f"ada-{uuid.uuid4().hex[:6]}@example.com",
        "password": "secret",
    }
    fields.update(overrides)
    return store.create("customer", fields)

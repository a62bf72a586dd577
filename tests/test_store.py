import pytest
from pymongo.errors import ConfigurationError

from database import Store
from errors import NotFound, ValidationError
from tests.conftest import make_customer, make_product


def test_create_assigns_id_and_defaults(store):
    product = store.create("product", {"name": "Oxford Shirt", "sku": "OX1", "price": 59.5})
    assert len(product["id"]) == 24
    assert product["inStock"] is True
    assert product["size"] == []
    assert "createdAt" in product and "updatedAt" in product
    assert store.get_by_id("product", product["id"]) == product


def test_categories_have_no_timestamps(store):
    category = store.create("category", {"name": "Shirts"})
    assert "createdAt" not in category


def test_create_requires_fields(store):
    with pytest.raises(ValidationError) as exc:
        store.create("product", {"sku": "X1", "price": 1})
    assert "name" in exc.value.message


def test_negative_price_rejected(store):
    with pytest.raises(ValidationError):
        make_product(store, price=-1)


def test_sku_is_unique(store):
    make_product(store, sku="DUP")
    with pytest.raises(ValidationError) as exc:
        make_product(store, sku="DUP")
    assert exc.value.kind == "ValidationError"
    assert len(store.list("product")) == 1


def test_email_is_unique(store):
    make_customer(store, email="same@example.com")
    with pytest.raises(ValidationError):
        make_customer(store, email="same@example.com")


def test_invalid_email_rejected(store):
    with pytest.raises(ValidationError):
        make_customer(store, email="not-an-email")


def test_get_missing_and_malformed_ids(store):
    with pytest.raises(NotFound):
        store.get_by_id("product", "64b7f0c2a1b2c3d4e5f60718")
    with pytest.raises(NotFound):
        store.get_by_id("product", "nope")


def test_list_with_filter(store):
    make_product(store, name="A", inStock=False)
    make_product(store, name="B")
    names = [p["name"] for p in store.list("product", {"inStock": True})]
    assert names == ["B"]


def test_update_only_touches_given_fields(store):
    product = make_product(store, description="Soft cotton", color=["Blue"])
    updated = store.update("product", product["id"], {"price": 12.5})
    assert updated["price"] == 12.5
    for key in ("name", "sku", "description", "color", "createdAt"):
        assert updated[key] == product[key]


def test_update_validates_merged_document(store):
    product = make_product(store)
    with pytest.raises(ValidationError):
        store.update("product", product["id"], {"price": -3})
    assert store.get_by_id("product", product["id"])["price"] == product["price"]


def test_update_ignores_unknown_keys(store):
    product = make_product(store)
    updated = store.update("product", product["id"], {"id": "x", "owner": "me"})
    assert updated["id"] == product["id"]
    assert "owner" not in updated


def test_update_missing(store):
    with pytest.raises(NotFound):
        store.update("product", "64b7f0c2a1b2c3d4e5f60718", {"price": 1})


def test_delete(store):
    product = make_product(store)
    store.delete("product", product["id"])
    with pytest.raises(NotFound):
        store.get_by_id("product", product["id"])
    with pytest.raises(NotFound):
        store.delete("product", product["id"])


def test_delete_malformed_id(store):
    with pytest.raises(NotFound):
        store.delete("order", "not-an-id")


def test_find_by_ids_skips_unknown(store):
    a = make_product(store)
    b = make_product(store)
    found = store.find_by_ids("product", [a["id"], b["id"], "garbage", "64b7f0c2a1b2c3d4e5f60718"])
    assert set(found) == {a["id"], b["id"]}


def test_unknown_kind(store):
    with pytest.raises(ValueError):
        store.list("wishlist")


def test_open_rejects_malformed_url():
    with pytest.raises(ConfigurationError):
        Store.open(url="http://localhost:27017")

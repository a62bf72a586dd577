from resolver import populate, populate_one, project
from tests.conftest import make_customer, make_product


def test_project_subset_keeps_id():
    doc = {"id": "1", "firstName": "Ada", "lastName": "Byron", "password": "x"}
    assert project(doc, ["firstName"]) == {"id": "1", "firstName": "Ada"}
    assert project(doc) == doc
    assert project(doc) is not doc


def test_populate_projection(store):
    customer = make_customer(store, firstName="John", lastName="Doe", email="john@example.com")
    order = {"id": "o1", "customer": customer["id"]}
    populate_one(store, order, "customer", "customer", ["firstName", "lastName", "email"])
    assert order["customer"] == {
        "id": customer["id"],
        "firstName": "John",
        "lastName": "Doe",
        "email": "john@example.com",
    }


def test_populate_line_items(store):
    shirt = make_product(store, name="Shirt")
    belt = make_product(store, name="Belt")
    order = {"products": [
        {"product": shirt["id"], "quantity": 1, "price": 1.0},
        {"product": belt["id"], "quantity": 2, "price": 2.0},
    ]}
    populate_one(store, order, "products.product", "product", ["name"])
    assert [line["product"]["name"] for line in order["products"]] == ["Shirt", "Belt"]
    assert [line["quantity"] for line in order["products"]] == [1, 2]


def test_deleted_reference_is_marked_unresolved(store):
    gone = make_customer(store)
    kept = make_customer(store)
    store.delete("customer", gone["id"])
    docs = [{"customer": gone["id"]}, {"customer": kept["id"]}]
    populate(store, docs, "customer", "customer", ["email"])
    assert docs[0]["customer"] == {"id": gone["id"], "unresolved": True}
    assert docs[1]["customer"]["email"] == kept["email"]


def test_expansions_are_independent(store):
    product = make_product(store)
    customer = make_customer(store)
    store.delete("product", product["id"])
    review = {"product": product["id"], "customer": customer["id"]}
    populate_one(store, review, "product", "product", ["name"])
    populate_one(store, review, "customer", "customer", ["firstName"])
    assert review["product"]["unresolved"] is True
    assert review["customer"]["firstName"] == "Ada"


def test_empty_reference_left_alone(store):
    product = {"name": "Tie", "category": None}
    populate_one(store, product, "category", "category", ["name"])
    assert product["category"] is None

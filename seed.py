"""
Seed the catalog with demo data.

Usage: python seed.py
"""
import logging

from config import settings
from database import Store
from schemas import COLLECTIONS

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"name": "Shirts", "description": "All types of shirts"},
    {"name": "Pants", "description": "Trousers, jeans, and more"},
    {"name": "Accessories", "description": "Belts, ties, and other accessories"},
]

PRODUCTS = [
    {
        "name": "Classic White Shirt",
        "sku": "CWS001",
        "description": "A timeless white shirt for any occasion",
        "price": 49.99,
        "size": ["S", "M", "L", "XL"],
        "color": ["White"],
        "inStock": True,
    },
    {
        "name": "Blue Denim Jeans",
        "sku": "BDJ001",
        "description": "Comfortable and stylish blue jeans",
        "price": 79.99,
        "size": ["30", "32", "34", "36"],
        "color": ["Blue"],
        "inStock": True,
    },
    {
        "name": "Leather Belt",
        "sku": "LB001",
        "description": "Classic brown leather belt",
        "price": 29.99,
        "size": ["One Size"],
        "color": ["Brown"],
        "inStock": True,
    },
]

CUSTOMERS = [
    {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john@example.com",
        "password": "password123",
        "address": {"street": "123 Main St", "city": "Anytown", "state": "CA", "zipCode": "12345", "country": "USA"},
    },
    {
        "firstName": "Jane",
        "lastName": "Smith",
        "email": "jane@example.com",
        "password": "password456",
        "address": {"street": "456 Elm St", "city": "Otherville", "state": "NY", "zipCode": "67890", "country": "USA"},
    },
]


def seed(store: Store):
    """Wipe every collection and insert the demo catalog. Returns the created documents by kind."""
    for kind in COLLECTIONS:
        store.purge(kind)

    categories = [store.create("category", c) for c in CATEGORIES]
    # each demo product sits in the category with the same position
    products = [
        store.create("product", {**p, "category": c["id"]})
        for p, c in zip(PRODUCTS, categories)
    ]
    customers = [store.create("customer", c) for c in CUSTOMERS]

    def line(product):
        return {"product": product["id"], "quantity": 1, "price": product["price"]}

    orders = [
        store.create("order", {
            "customer": customers[0]["id"],
            "products": [line(products[0]), line(products[2])],
            "totalAmount": round(products[0]["price"] + products[2]["price"], 2),
            "status": "Pending",
            "shippingAddress": customers[0]["address"],
        }),
        store.create("order", {
            "customer": customers[1]["id"],
            "products": [line(products[1])],
            "totalAmount": products[1]["price"],
            "status": "Shipped",
            "shippingAddress": customers[1]["address"],
        }),
    ]
    reviews = [
        store.create("review", {
            "product": products[0]["id"],
            "customer": customers[0]["id"],
            "rating": 5,
            "comment": "Great shirt, very comfortable!",
        }),
        store.create("review", {
            "product": products[1]["id"],
            "customer": customers[1]["id"],
            "rating": 4,
            "comment": "Nice jeans, but a bit tight.",
        }),
    ]
    logger.info(
        f"Seeded {len(categories)} categories, {len(products)} products, {len(customers)} customers, "
        f"{len(orders)} orders and {len(reviews)} reviews"
    )
    return {
        "category": categories,
        "product": products,
        "customer": customers,
        "order": orders,
        "review": reviews,
    }


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    store = Store.open()
    try:
        seed(store)
    finally:
        store.close()

"""
Translation between request payloads, stored documents and response bodies.
"""
from typing import Any, Dict, List

from pydantic import BaseModel

from database import Store
from resolver import populate

HIDDEN_FIELDS = {"customer": {"password"}}

CUSTOMER_NAME = ["firstName", "lastName"]
CUSTOMER_CONTACT = ["firstName", "lastName", "email"]


def create_fields(payload: BaseModel) -> Dict[str, Any]:
    return payload.model_dump()


def patch_fields(payload: BaseModel) -> Dict[str, Any]:
    """Only keys the client actually sent; explicit nulls leave the field untouched."""
    return {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}


def to_response(kind: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    hidden = HIDDEN_FIELDS.get(kind, ())
    return {k: v for k, v in doc.items() if k not in hidden}


def deleted(kind: str) -> Dict[str, str]:
    return {"message": f"{kind.capitalize()} deleted successfully"}


# Read views: which references each response expands

def product_detail(store: Store, doc: Dict[str, Any]) -> Dict[str, Any]:
    populate(store, [doc], "category", "category", ["name", "description"])
    return to_response("product", doc)


def category_detail(store: Store, doc: Dict[str, Any]) -> Dict[str, Any]:
    populate(store, [doc], "parentCategory", "category", ["name"])
    return to_response("category", doc)


def order_list(store: Store, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    populate(store, docs, "customer", "customer", CUSTOMER_CONTACT)
    return [to_response("order", d) for d in docs]


def order_detail(store: Store, doc: Dict[str, Any]) -> Dict[str, Any]:
    populate(store, [doc], "customer", "customer", CUSTOMER_CONTACT)
    populate(store, [doc], "products.product", "product")
    return to_response("order", doc)


def review_list(store: Store, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    populate(store, docs, "product", "product", ["name"])
    populate(store, docs, "customer", "customer", CUSTOMER_NAME)
    return [to_response("review", d) for d in docs]


def product_reviews(store: Store, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    populate(store, docs, "customer", "customer", CUSTOMER_NAME)
    return [to_response("review", d) for d in docs]

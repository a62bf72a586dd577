"""
Order and review creation rules.

Both validators only read through the store until every check has passed, so a
rejected request never leaves a partial document behind. Reading product prices
and inserting the order are separate single-document operations: a price edited
in between is not detected.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from database import Store
from errors import MissingReference, NotFound, RangeError, TotalMismatch, ValidationError

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def to_decimal(amount: Any) -> Decimal:
    value = Decimal(str(amount))
    if not value.is_finite():
        raise ValidationError(f"amount: must be a finite number, got {amount!r}")
    return value


def to_cents(amount: Any) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    return int((to_decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> float:
    return float(Decimal(cents) / 100)


def _require(store: Store, kind: str, ref: Any) -> Dict[str, Any]:
    try:
        return store.get_by_id(kind, ref)
    except NotFound:
        raise MissingReference(kind, ref)


def check_rating(rating: Any) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("rating: must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise RangeError(f"rating: must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


def create_order(store: Store, customer_id: str, items: List[Dict[str, Any]],
                 total_amount: Any, shipping_address: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Validate and persist a new order.

    ``items`` are ``{"product": id, "quantity": n}`` dicts. Each referenced
    product is looked up in order and the first missing one aborts the request.
    The stored line items carry the product price read here, so later price
    edits do not change the order's history.
    """
    if not items:
        raise ValidationError("products: an order needs at least one line item")

    lines = []
    exact = Decimal(0)
    for item in items:
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError(f"products.quantity: must be a positive integer, got {quantity!r}")
        product = _require(store, "product", item.get("product"))
        exact += to_decimal(product["price"]) * quantity
        lines.append({"product": product["id"], "quantity": quantity, "price": product["price"]})

    customer = _require(store, "customer", customer_id)

    # rounded to cents once, after summing
    calculated = to_cents(exact)
    claimed = to_cents(total_amount)
    if calculated != claimed:
        logger.info(f"Rejected order for customer {customer['id']}: calculated {calculated} cents, claimed {claimed} cents")
        raise TotalMismatch(calculated=from_cents(calculated), claimed=float(total_amount))

    order = store.create("order", {
        "customer": customer["id"],
        "products": lines,
        "totalAmount": float(exact),
        "status": "Pending",
        "shippingAddress": shipping_address,
    })
    logger.info(f"Created order {order['id']} ({len(lines)} line items, total {order['totalAmount']})")
    return order


def create_review(store: Store, product_id: str, customer_id: Optional[str], rating: Any,
                  comment: Optional[str] = None) -> Dict[str, Any]:
    product = _require(store, "product", product_id)
    if customer_id is None:
        raise ValidationError("customer: field required")
    customer = _require(store, "customer", customer_id)
    check_rating(rating)
    return store.create("review", {
        "product": product["id"],
        "customer": customer["id"],
        "rating": rating,
        "comment": comment,
    })


def update_review(store: Store, review_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    if "rating" in fields:
        check_rating(fields["rating"])
    return store.update("review", review_id, fields)

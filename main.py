import os
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import services
from config import settings
from database import Store, describe
from errors import AppError, NotImplementedCapability
from mappers import (
    category_detail, create_fields, deleted, order_detail, order_list, patch_fields,
    product_detail, product_reviews, review_list, to_response,
)
from schemas import Address, OrderStatus, Product

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = Store.open()
    yield
    app.state.store.close()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": describe(exc.errors()), "kind": "ValidationError"})


def get_store(request: Request) -> Store:
    return request.app.state.store


router = APIRouter()


@app.get("/")
def read_root():
    return {"message": "Men's Wear Emporium API is running"}


@app.get("/test")
def test_database(request: Request):
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": None,
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": []
    }
    try:
        store = getattr(request.app.state, "store", None)
        if store is not None:
            response["database"] = "✅ Available"
            response["database_url"] = "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set"
            response["database_name"] = getattr(store.db, 'name', None) or "unknown"
            response["connection_status"] = "Connected"
            try:
                collections = store.db.list_collection_names()
                response["collections"] = collections[:10]
                response["database"] = "✅ Connected & Working"
            except Exception as e:
                response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
        else:
            response["database"] = "⚠️  Available but not initialized"
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:50]}"
    return response


# Request payloads

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)
    category: Optional[str] = None
    size: Optional[List[str]] = None
    color: Optional[List[str]] = None
    inStock: Optional[bool] = None
    images: Optional[List[str]] = None


class OrderItemPayload(BaseModel):
    product: str
    quantity: int = 1


class OrderPayload(BaseModel):
    customerId: str
    products: List[OrderItemPayload]
    totalAmount: float = Field(..., allow_inf_nan=False)
    shippingAddress: Optional[Address] = None


class OrderUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    shippingAddress: Optional[Address] = None


class ReviewPayload(BaseModel):
    product: str
    customer: Optional[str] = None
    rating: int
    comment: Optional[str] = None


class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


# Products
@router.post("/products", status_code=201)
def create_product(product: Product, store: Store = Depends(get_store)):
    return to_response("product", store.create("product", create_fields(product)))


@router.get("/products")
def list_products(store: Store = Depends(get_store)):
    return [to_response("product", p) for p in store.list("product")]


@router.get("/products/{product_id}")
def get_product(product_id: str, store: Store = Depends(get_store)):
    return product_detail(store, store.get_by_id("product", product_id))


@router.patch("/products/{product_id}")
def update_product(product_id: str, payload: ProductUpdate, store: Store = Depends(get_store)):
    return to_response("product", store.update("product", product_id, patch_fields(payload)))


@router.delete("/products/{product_id}")
def delete_product(product_id: str, store: Store = Depends(get_store)):
    store.delete("product", product_id)
    return deleted("product")


# Orders
@router.post("/orders", status_code=201)
def create_order(payload: OrderPayload, store: Store = Depends(get_store)):
    order = services.create_order(
        store,
        customer_id=payload.customerId,
        items=[i.model_dump() for i in payload.products],
        total_amount=payload.totalAmount,
        shipping_address=payload.shippingAddress.model_dump() if payload.shippingAddress else None,
    )
    return to_response("order", order)


@router.get("/orders")
def list_orders(store: Store = Depends(get_store)):
    return order_list(store, store.list("order"))


@router.get("/orders/{order_id}")
def get_order(order_id: str, store: Store = Depends(get_store)):
    return order_detail(store, store.get_by_id("order", order_id))


@router.patch("/orders/{order_id}")
def update_order(order_id: str, payload: OrderUpdate, store: Store = Depends(get_store)):
    return to_response("order", store.update("order", order_id, patch_fields(payload)))


@router.delete("/orders/{order_id}")
def delete_order(order_id: str, store: Store = Depends(get_store)):
    store.delete("order", order_id)
    return deleted("order")


# Reviews
@router.post("/reviews", status_code=201)
def create_review(payload: ReviewPayload, store: Store = Depends(get_store)):
    review = services.create_review(
        store,
        product_id=payload.product,
        customer_id=payload.customer,
        rating=payload.rating,
        comment=payload.comment,
    )
    return to_response("review", review)


@router.get("/reviews")
def list_reviews(store: Store = Depends(get_store)):
    return review_list(store, store.list("review"))


@router.get("/reviews/product/{product_id}")
def list_product_reviews(product_id: str, store: Store = Depends(get_store)):
    return product_reviews(store, store.list("review", {"product": product_id}))


@router.get("/reviews/{review_id}")
def get_review(review_id: str, store: Store = Depends(get_store)):
    return review_list(store, [store.get_by_id("review", review_id)])[0]


@router.patch("/reviews/{review_id}")
def update_review(review_id: str, payload: ReviewUpdate, store: Store = Depends(get_store)):
    return to_response("review", services.update_review(store, review_id, patch_fields(payload)))


@router.delete("/reviews/{review_id}")
def delete_review(review_id: str, store: Store = Depends(get_store)):
    store.delete("review", review_id)
    return deleted("review")


# Categories and customers are read-only
@router.get("/categories")
def list_categories(store: Store = Depends(get_store)):
    return [to_response("category", c) for c in store.list("category")]


@router.get("/categories/{category_id}")
def get_category(category_id: str, store: Store = Depends(get_store)):
    return category_detail(store, store.get_by_id("category", category_id))


@router.post("/categories")
@router.patch("/categories/{category_id}")
@router.delete("/categories/{category_id}")
def write_category():
    raise NotImplementedCapability("Category writes are not implemented")


@router.get("/customers")
def list_customers(store: Store = Depends(get_store)):
    return [to_response("customer", c) for c in store.list("customer")]


@router.get("/customers/{customer_id}")
def get_customer(customer_id: str, store: Store = Depends(get_store)):
    return to_response("customer", store.get_by_id("customer", customer_id))


@router.post("/customers")
@router.patch("/customers/{customer_id}")
@router.delete("/customers/{customer_id}")
def write_customer():
    raise NotImplementedCapability("Customer writes are not implemented")


app.include_router(router)
app.include_router(router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)

"""
Database Schemas for the Men's Wear Emporium catalog

Each Pydantic model represents a MongoDB collection. The collection name is the lowercase
of the class name (e.g., Product -> "product").

References to other documents are stored as hex id strings and are only expanded
when a read asks for it (see resolver.py).
"""
from __future__ import annotations
from pydantic import BaseModel, Field, EmailStr
from typing import Dict, List, Literal, Optional, Type

OrderStatus = Literal["Pending", "Shipped", "Delivered"]


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None


class Category(BaseModel):
    name: str = Field(..., min_length=1, description="Category display name")
    description: Optional[str] = Field(None, description="Short description")
    parentCategory: Optional[str] = Field(None, description="Optional parent category id")


class Product(BaseModel):
    name: str = Field(..., min_length=1, description="Product name")
    sku: str = Field(..., min_length=1, description="Unique stock keeping unit")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Price in dollars")
    category: Optional[str] = Field(None, description="Id of the category this product belongs to")
    size: List[str] = Field(default_factory=list, description="Available sizes")
    color: List[str] = Field(default_factory=list, description="Available colors")
    inStock: bool = Field(True, description="Whether product is in stock")
    images: List[str] = Field(default_factory=list, description="Image URLs")


class Customer(BaseModel):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    address: Optional[Address] = None


class OrderLine(BaseModel):
    product: str = Field(..., description="Id of the ordered product")
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price at the time the order was placed")


class Order(BaseModel):
    customer: str = Field(..., description="Id of the ordering customer")
    products: List[OrderLine] = Field(..., min_length=1)
    totalAmount: float = Field(..., ge=0, allow_inf_nan=False)
    status: OrderStatus = "Pending"
    shippingAddress: Optional[Address] = None


class Review(BaseModel):
    product: str = Field(..., description="Id of the reviewed product")
    customer: str = Field(..., description="Id of the reviewing customer")
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "category": Category,
    "product": Product,
    "customer": Customer,
    "order": Order,
    "review": Review,
}

# Mongoose-style createdAt/updatedAt; categories never had them
TIMESTAMPED = {"product", "customer", "order", "review"}

# (collection, field) pairs backed by a unique index
UNIQUE_FIELDS = [("product", "sku"), ("customer", "email")]

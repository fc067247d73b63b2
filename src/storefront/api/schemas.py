"""Pydantic request/response schemas for the Storefront API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Shared ---


class AddressSchema(BaseModel):
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field("India", max_length=100)


class StatusResponse(BaseModel):
    status: str = "ok"


# --- Accounts ---


class RegisterAccountRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "full_name": "Asha Rao",
                    "email": "asha@example.com",
                    "phone": "+91-98450-00000",
                    "address": {"street": "12 MG Road", "city": "Bengaluru", "postal_code": "560001"},
                }
            ]
        }
    }

    full_name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=20)
    address: AddressSchema | None = None


class UpdateAccountRequest(BaseModel):
    full_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    address: AddressSchema | None = None


class AdminUpdateAccountRequest(BaseModel):
    full_name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    role: str | None = Field(None, max_length=20)


class AccountIdResponse(BaseModel):
    account_id: str


class AccountResponse(BaseModel):
    account_id: str
    full_name: str
    email: str
    phone: str | None = None
    address: AddressSchema | None = None
    role: str


# --- Products ---


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Filter Coffee Maker",
                    "brand": "Kaapi",
                    "category": "Kitchen",
                    "description": "Stainless steel South Indian filter.",
                    "price": 899.0,
                    "stock": 25,
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    brand: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    stock: int = Field(0, ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    price: float | None = Field(None, ge=0)
    brand: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    description: str | None = None


class ReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class ReviewResponse(BaseModel):
    account_id: str
    reviewer_name: str
    rating: int
    comment: str | None = None


class ProductResponse(BaseModel):
    product_id: str
    name: str
    brand: str | None = None
    category: str | None = None
    description: str | None = None
    price: float
    rating: float
    stock: int | None = None
    reviews: list[ReviewResponse] = []


class RatingResponse(BaseModel):
    rating: float


# --- Inventory ---


class StockAdjustmentRequest(BaseModel):
    delta: int


class AvailabilityResponse(BaseModel):
    product_id: str
    available: bool
    current_stock: int


class StockResponse(BaseModel):
    product_id: str
    current_stock: int


# --- Orders ---


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int
    name: str | None = Field(None, max_length=255)
    price: float | None = Field(None, ge=0)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2, "name": "Filter Coffee Maker", "price": 899.0}],
                    "total_amount": 1798.0,
                    "payment_method": "upi",
                    "delivery_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "KA",
                        "postal_code": "560001",
                        "country": "India",
                    },
                }
            ]
        }
    }

    items: list[OrderLineRequest]
    total_amount: float
    payment_method: str = "cod"
    delivery_address: AddressSchema | None = None


class MarkPaidRequest(BaseModel):
    payment_method: str | None = None


class UpdateStatusRequest(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str
    payment_status: str


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    unit_price: float
    quantity: int


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    items: list[OrderItemResponse]
    total_amount: float
    delivery_address: AddressSchema | None = None
    payment_method: str
    payment_status: str
    status: str
    cancelled_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


# --- Cart ---


class CartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    flavour: str | None = Field(None, max_length=100)


class CartItemResponse(BaseModel):
    product_id: str
    quantity: int
    flavour: str | None = None
    name: str | None = None
    price: float | None = None


class CartResponse(BaseModel):
    customer_id: str
    items: list[CartItemResponse] = []

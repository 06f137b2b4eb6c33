from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID
from datetime import datetime

from storefront.schemas.common import Envelope
from storefront.schemas.product import ProductResponse

OrderStatus = Literal["Not Processed", "Processing", "Shipped", "Delivered", "Cancelled"]


class CartItem(BaseModel):
    id: UUID = Field(..., description="Product UUID")


class PaymentRequest(BaseModel):
    nonce: str = Field(..., min_length=1, description="Payment method token from the client-side gateway SDK", example="pm_card_visa")
    cart: List[CartItem] = Field(..., min_length=1, description="Cart lines; repeat a product to buy it twice")


class PaymentResponse(BaseModel):
    ok: bool = True
    order_id: UUID


class ClientTokenResponse(BaseModel):
    client_token: str


class OrderBuyer(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: UUID
    products: List[ProductResponse]
    payment: Dict[str, Any]
    buyer: OrderBuyer
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderListEnvelope(Envelope):
    orders: List[OrderResponse]


class OrderEnvelope(Envelope):
    order: OrderResponse

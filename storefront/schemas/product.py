from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from storefront.schemas.common import Envelope
from storefront.schemas.category import CategoryResponse


class ProductResponse(BaseModel):
    id: UUID = Field(..., description="Product UUID", example="123e4567-e89b-12d3-a456-426614174000")
    name: str = Field(..., description="Product name", example="Laptop")
    slug: str = Field(..., description="Product URL slug", example="laptop")
    description: str = Field(..., description="Product description")
    price: float = Field(..., description="Unit price", example=1499.99)
    quantity: int = Field(..., description="Units in stock", example=10)
    category: CategoryResponse
    shipping: Optional[bool] = Field(None, description="Whether the product ships")
    has_photo: bool = Field(False, description="Photo available at /product-photo/{id}")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductFilterRequest(BaseModel):
    checked: List[UUID] = Field(default_factory=list, description="Category UUIDs (OR logic)")
    radio: List[float] = Field(default_factory=list, description="Price range as [min, max]")

    @field_validator("radio")
    @classmethod
    def validate_range(cls, value: List[float]) -> List[float]:
        if value and len(value) != 2:
            raise ValueError("Price range must be [min, max]")
        if value and value[0] > value[1]:
            raise ValueError("Price range minimum exceeds maximum")
        return value


class ProductEnvelope(Envelope):
    products: ProductResponse


class SingleProductEnvelope(Envelope):
    product: ProductResponse


class ProductListEnvelope(Envelope):
    products: List[ProductResponse]


class ProductCatalogEnvelope(ProductListEnvelope):
    count_total: int


class ProductCountEnvelope(Envelope):
    total: int


class ProductCategoryEnvelope(Envelope):
    category: CategoryResponse
    products: List[ProductResponse]


class ProductForm(BaseModel):
    """Multipart form fields for creating or replacing a product"""
    name: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    category: UUID = Field(..., description="Category UUID")
    quantity: int = Field(..., ge=0)
    shipping: Optional[bool] = None

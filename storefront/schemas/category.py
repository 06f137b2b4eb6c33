from pydantic import BaseModel, Field, field_validator
from typing import List
from uuid import UUID
from datetime import datetime

from storefront.schemas.common import Envelope


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, example="Electronics")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is Required")
        return value


class CategoryResponse(BaseModel):
    id: UUID = Field(..., description="Category UUID", example="123e4567-e89b-12d3-a456-426614174000")
    name: str = Field(..., description="Category name", example="Electronics")
    slug: str = Field(..., description="Category URL slug", example="electronics")
    created_at: datetime = Field(..., description="Creation timestamp")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Electronics",
                "slug": "electronics",
                "created_at": "2024-01-15T10:30:00Z"
            }
        }


class CategoryEnvelope(Envelope):
    category: CategoryResponse


class CategoryListEnvelope(Envelope):
    category: List[CategoryResponse]

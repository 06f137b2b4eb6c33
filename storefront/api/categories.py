from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID
from storefront.auth.dependencies import is_admin
from storefront.db.database import get_db
from storefront.models.user import User
from storefront.schemas.common import Envelope, ADMIN_ERROR_RESPONSES
from storefront.schemas.category import CategoryRequest, CategoryEnvelope, CategoryListEnvelope
from storefront.services.category_service import CategoryService

router = APIRouter(
    prefix="/category",
    tags=["Categories"]
)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    """Dependency to get category service"""
    return CategoryService(db)


@router.post(
    "/create-category",
    response_model=CategoryEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category (admin only)",
    description="""
    Create a category. The slug is derived from the name.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: admin
    - Category names are unique
    """,
    responses={
        **ADMIN_ERROR_RESPONSES,
        409: {"description": "Category Already Exists"}
    }
)
async def create_category(
    data: CategoryRequest,
    current_user: User = Depends(is_admin),
    category_service: CategoryService = Depends(get_category_service)
):
    category = category_service.create_category(data.name)
    return {"success": True, "message": "New category created", "category": category}


@router.put(
    "/update-category/{category_id}",
    response_model=CategoryEnvelope,
    summary="Rename a category (admin only)",
    responses={
        **ADMIN_ERROR_RESPONSES,
        404: {"description": "Category not found"},
        409: {"description": "Category Already Exists"}
    }
)
async def update_category(
    category_id: UUID,
    data: CategoryRequest,
    current_user: User = Depends(is_admin),
    category_service: CategoryService = Depends(get_category_service)
):
    category = category_service.update_category(category_id, data.name)
    return {"success": True, "message": "Category Updated Successfully", "category": category}


@router.get(
    "/get-category",
    response_model=CategoryListEnvelope,
    summary="List all categories",
    description="Public endpoint. Categories are ordered by name."
)
async def list_categories(
    category_service: CategoryService = Depends(get_category_service)
):
    return {
        "success": True,
        "message": "All Categories List",
        "category": category_service.list_categories()
    }


@router.get(
    "/single-category/{slug}",
    response_model=CategoryEnvelope,
    summary="Get category by slug",
    responses={
        404: {"description": "Category not found"}
    }
)
async def get_category(
    slug: str,
    category_service: CategoryService = Depends(get_category_service)
):
    category = category_service.get_category_by_slug(slug)
    return {"success": True, "message": "Get Single Category Successfully", "category": category}


@router.delete(
    "/delete-category/{category_id}",
    response_model=Envelope,
    summary="Delete a category (admin only)",
    description="Categories that still have products cannot be deleted.",
    responses={
        **ADMIN_ERROR_RESPONSES,
        404: {"description": "Category not found"},
        409: {"description": "Category still has products"}
    }
)
async def delete_category(
    category_id: UUID,
    current_user: User = Depends(is_admin),
    category_service: CategoryService = Depends(get_category_service)
):
    category_service.delete_category(category_id)
    return {"success": True, "message": "Category Deleted Successfully"}

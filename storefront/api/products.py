from fastapi import APIRouter, Depends, File, Form, UploadFile, status
import asyncio
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional, Tuple
from uuid import UUID
from storefront.auth.dependencies import require_sign_in, is_admin
from storefront.db.database import get_db
from storefront.models.user import User
from storefront.schemas.common import Envelope, ERROR_RESPONSES, ADMIN_ERROR_RESPONSES
from storefront.schemas.order import PaymentRequest, PaymentResponse, ClientTokenResponse
from storefront.schemas.product import (
    ProductForm, ProductFilterRequest, ProductEnvelope, SingleProductEnvelope,
    ProductListEnvelope, ProductCatalogEnvelope, ProductCountEnvelope, ProductCategoryEnvelope,
)
from storefront.services.payment_service import PaymentService
from storefront.services.product_service import ProductService

router = APIRouter(
    prefix="/product",
    tags=["Products"]
)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get product service"""
    return ProductService(db)


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency to get payment service"""
    return PaymentService(db)


def product_form(
    name: str = Form(..., min_length=1, max_length=500),
    description: str = Form(..., min_length=1),
    price: float = Form(..., gt=0),
    category: UUID = Form(..., description="Category UUID"),
    quantity: int = Form(..., ge=0),
    shipping: Optional[bool] = Form(None),
) -> ProductForm:
    """Collect the multipart product fields"""
    return ProductForm(
        name=name,
        description=description,
        price=price,
        category=category,
        quantity=quantity,
        shipping=shipping,
    )


async def product_photo(photo: Optional[UploadFile] = File(None)) -> Tuple[Optional[bytes], Optional[str]]:
    """Read the optional uploaded photo"""
    if photo is None or not photo.filename:
        return None, None
    data = await photo.read()
    if not data:
        return None, None
    return data, photo.content_type


@router.post(
    "/create-product",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product (admin only)",
    description="""
    Create a product from a `multipart/form-data` request.

    **Fields:** name, description, price (> 0), category (UUID), quantity (>= 0),
    shipping (optional), photo (optional file, at most 1 MB).
    """,
    responses={
        **ADMIN_ERROR_RESPONSES,
        404: {"description": "Category not found"}
    }
)
async def create_product(
    form: ProductForm = Depends(product_form),
    photo: Tuple[Optional[bytes], Optional[str]] = Depends(product_photo),
    current_user: User = Depends(is_admin),
    product_service: ProductService = Depends(get_product_service)
):
    data, content_type = photo
    product = product_service.create_product(form, data, content_type)
    return {"success": True, "message": "Product Created Successfully", "products": product}


@router.put(
    "/update-product/{product_id}",
    response_model=ProductEnvelope,
    summary="Update a product (admin only)",
    description="""
    Replace the product fields. The stored photo is kept when no new photo is uploaded.
    """,
    responses={
        **ADMIN_ERROR_RESPONSES,
        404: {"description": "Product or category not found"}
    }
)
async def update_product(
    product_id: UUID,
    form: ProductForm = Depends(product_form),
    photo: Tuple[Optional[bytes], Optional[str]] = Depends(product_photo),
    current_user: User = Depends(is_admin),
    product_service: ProductService = Depends(get_product_service)
):
    data, content_type = photo
    product = product_service.update_product(product_id, form, data, content_type)
    return {"success": True, "message": "Product Updated Successfully", "products": product}


@router.get(
    "/get-product",
    response_model=ProductCatalogEnvelope,
    summary="Newest products",
    description="Public endpoint. Returns the 12 newest products."
)
async def list_products(
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.list_products()
    return {
        "success": True,
        "message": "All Products Fetched",
        "count_total": len(products),
        "products": products
    }


@router.get(
    "/get-product/{slug}",
    response_model=SingleProductEnvelope,
    summary="Get product by slug",
    responses={
        404: {"description": "Product not found"}
    }
)
async def get_product(
    slug: str,
    product_service: ProductService = Depends(get_product_service)
):
    product = product_service.get_product_by_slug(slug)
    return {"success": True, "message": "Single Product Fetched", "product": product}


@router.get(
    "/product-photo/{product_id}",
    summary="Get product photo",
    description="Returns the raw photo bytes with their stored content type.",
    response_class=Response,
    responses={
        200: {"content": {"image/*": {}}, "description": "Photo bytes"},
        404: {"description": "Product or photo not found"}
    }
)
async def get_product_photo(
    product_id: UUID,
    product_service: ProductService = Depends(get_product_service)
):
    data, content_type = product_service.get_photo(product_id)
    return Response(content=data, media_type=content_type)


@router.delete(
    "/delete-product/{product_id}",
    response_model=Envelope,
    summary="Delete a product (admin only)",
    description="Products that appear on orders cannot be deleted.",
    responses={
        **ADMIN_ERROR_RESPONSES,
        404: {"description": "Product not found"},
        409: {"description": "Product is part of existing orders"}
    }
)
async def delete_product(
    product_id: UUID,
    current_user: User = Depends(is_admin),
    product_service: ProductService = Depends(get_product_service)
):
    product_service.delete_product(product_id)
    return {"success": True, "message": "Product Deleted Successfully"}


@router.post(
    "/product-filters",
    response_model=ProductListEnvelope,
    summary="Filter products",
    description="""
    Filter by categories and price.

    - `checked`: category UUIDs; products in ANY of them match (empty = all)
    - `radio`: `[min, max]` inclusive price range (empty = any price)
    """
)
async def filter_products(
    data: ProductFilterRequest,
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.filter_products(data.checked, data.radio)
    return {"success": True, "message": "Filtered Products", "products": products}


@router.get(
    "/product-count",
    response_model=ProductCountEnvelope,
    summary="Count products"
)
async def product_count(
    product_service: ProductService = Depends(get_product_service)
):
    return {"success": True, "message": "Product Count", "total": product_service.count_products()}


@router.get(
    "/product-list/{page}",
    response_model=ProductListEnvelope,
    summary="Paginated products",
    description="Six products per page, newest first. Pages are 1-indexed."
)
async def product_list(
    page: int,
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.list_page(page)
    return {"success": True, "message": f"Products Page {page}", "products": products}


@router.get(
    "/search/{keyword}",
    response_model=ProductListEnvelope,
    summary="Search products",
    description="Case-insensitive match on product name or description."
)
async def search_products(
    keyword: str,
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.search(keyword)
    return {"success": True, "message": "Search Results", "products": products}


@router.get(
    "/related-product/{product_id}/{category_id}",
    response_model=ProductListEnvelope,
    summary="Related products",
    description="Up to 3 other products from the same category."
)
async def related_products(
    product_id: UUID,
    category_id: UUID,
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.related_products(product_id, category_id)
    return {"success": True, "message": "Related Products", "products": products}


@router.get(
    "/product-category/{slug}",
    response_model=ProductCategoryEnvelope,
    summary="Products of a category",
    responses={
        404: {"description": "Category not found"}
    }
)
async def products_by_category(
    slug: str,
    product_service: ProductService = Depends(get_product_service)
):
    category, products = product_service.products_by_category_slug(slug)
    return {"success": True, "message": "Category Products", "category": category, "products": products}


@router.get(
    "/payment/token",
    response_model=ClientTokenResponse,
    summary="Get payment client token",
    description="Client secret used by the browser payment SDK to collect a payment method.",
    responses=ERROR_RESPONSES
)
async def payment_token(
    current_user: User = Depends(require_sign_in),
    payment_service: PaymentService = Depends(get_payment_service)
):
    # Gateway calls are blocking network requests
    client_token = await asyncio.to_thread(payment_service.generate_client_token)
    return {"client_token": client_token}


@router.post(
    "/payment",
    response_model=PaymentResponse,
    summary="Pay for the cart",
    description="""
    Charge the cart total to the payment method identified by `nonce` and create an order.

    The total is the sum of the stored price of every cart line. A declined card
    still records an order with an unsuccessful payment and answers 402.
    """,
    responses={
        **ERROR_RESPONSES,
        402: {"description": "Payment declined"},
        404: {"description": "Product in cart not found"}
    }
)
async def payment(
    data: PaymentRequest,
    current_user: User = Depends(require_sign_in),
    payment_service: PaymentService = Depends(get_payment_service)
):
    cart_ids = [item.id for item in data.cart]
    order = await asyncio.to_thread(payment_service.checkout, current_user, data.nonce, cart_ids)
    return {"ok": True, "order_id": order.id}

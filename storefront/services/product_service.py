from sqlalchemy.orm import Session, undefer
from sqlalchemy import or_
from slugify import slugify
from typing import List, Optional, Tuple
from uuid import UUID
import logging

from storefront.config import settings
from storefront.core.errors import BadRequestError, ConflictError, NotFoundError
from storefront.models.category import Category
from storefront.models.order import OrderItem
from storefront.models.product import Product
from storefront.schemas.product import ProductForm

logger = logging.getLogger(__name__)

HOME_PAGE_LIMIT = 12
PER_PAGE = 6
RELATED_LIMIT = 3


def _like_pattern(keyword: str) -> str:
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductService:
    """Service layer for product operations"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_category(self, category_id: UUID) -> Category:
        category = self.db.get(Category, category_id)
        if not category:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    def _validate_photo(self, photo: Optional[bytes]) -> None:
        if photo is not None and len(photo) > settings.max_photo_bytes:
            raise BadRequestError("Photo should be less than 1mb")

    def _slug(self, name: str) -> str:
        slug = slugify(name)
        if not slug:
            raise BadRequestError("Name must contain letters or digits")
        return slug

    def _get(self, product_id: UUID) -> Product:
        product = self.db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _newest(self):
        return self.db.query(Product).order_by(Product.created_at.desc(), Product.id)

    def create_product(
        self,
        form: ProductForm,
        photo: Optional[bytes] = None,
        photo_content_type: Optional[str] = None
    ) -> Product:
        """Create a new product"""
        self._validate_photo(photo)
        self._validate_category(form.category)

        product = Product(
            name=form.name,
            slug=self._slug(form.name),
            description=form.description,
            price=form.price,
            quantity=form.quantity,
            category_id=form.category,
            shipping=form.shipping,
        )
        if photo:
            product.photo = photo
            product.photo_content_type = photo_content_type or "application/octet-stream"

        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Created product {product.slug} ({product.id})")
        return product

    def update_product(
        self,
        product_id: UUID,
        form: ProductForm,
        photo: Optional[bytes] = None,
        photo_content_type: Optional[str] = None
    ) -> Product:
        """Replace product fields; the stored photo is kept unless a new one is given"""
        self._validate_photo(photo)
        product = self._get(product_id)
        self._validate_category(form.category)
        slug = self._slug(form.name)

        product.name = form.name
        product.slug = slug
        product.description = form.description
        product.price = form.price
        product.quantity = form.quantity
        product.category_id = form.category
        product.shipping = form.shipping
        if photo:
            product.photo = photo
            product.photo_content_type = photo_content_type or "application/octet-stream"

        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Updated product {product.slug} ({product.id})")
        return product

    def delete_product(self, product_id: UUID) -> None:
        product = self._get(product_id)

        # Orders keep referencing what was bought
        ordered = self.db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first()
        if ordered:
            raise ConflictError("Product is part of existing orders")

        self.db.delete(product)
        self.db.commit()
        logger.info(f"Deleted product {product.slug} ({product_id})")

    def list_products(self, limit: int = HOME_PAGE_LIMIT) -> List[Product]:
        """Newest products first"""
        return self._newest().limit(limit).all()

    def get_product_by_slug(self, slug: str) -> Product:
        product = self.db.query(Product).filter(Product.slug == slug).first()
        if not product:
            raise NotFoundError("Product not found")
        return product

    def get_photo(self, product_id: UUID) -> Tuple[bytes, str]:
        product = self.db.query(Product).options(undefer(Product.photo)).filter(
            Product.id == product_id
        ).first()
        if not product:
            raise NotFoundError("Product not found")
        if not product.photo:
            raise NotFoundError("Product has no photo")
        return product.photo, product.photo_content_type

    def filter_products(self, checked: List[UUID], radio: List[float]) -> List[Product]:
        """Products in any of the checked categories and within the [min, max] price range"""
        query = self._newest()
        if checked:
            query = query.filter(Product.category_id.in_(checked))
        if radio:
            low, high = radio
            query = query.filter(Product.price >= low, Product.price <= high)
        return query.all()

    def count_products(self) -> int:
        return self.db.query(Product).count()

    def list_page(self, page: int, per_page: int = PER_PAGE) -> List[Product]:
        """One page of products, newest first (1-indexed)"""
        if page < 1:
            raise BadRequestError("Page must be 1 or greater")
        return self._newest().offset((page - 1) * per_page).limit(per_page).all()

    def search(self, keyword: str) -> List[Product]:
        """Case-insensitive substring match on name or description"""
        keyword = keyword.strip()
        if not keyword:
            raise BadRequestError("Keyword is Required")
        pattern = _like_pattern(keyword)
        return self._newest().filter(
            or_(
                Product.name.ilike(pattern, escape="\\"),
                Product.description.ilike(pattern, escape="\\"),
            )
        ).all()

    def related_products(self, product_id: UUID, category_id: UUID, limit: int = RELATED_LIMIT) -> List[Product]:
        """Other products from the same category"""
        return self._newest().filter(
            Product.category_id == category_id,
            Product.id != product_id
        ).limit(limit).all()

    def products_by_category_slug(self, slug: str) -> Tuple[Category, List[Product]]:
        category = self.db.query(Category).filter(Category.slug == slug).first()
        if not category:
            raise NotFoundError("Category not found")
        products = self._newest().filter(Product.category_id == category.id).all()
        return category, products

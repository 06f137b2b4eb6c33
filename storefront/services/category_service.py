from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from slugify import slugify
from typing import List
from uuid import UUID
import logging

from storefront.core.errors import BadRequestError, ConflictError, NotFoundError
from storefront.models.category import Category
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class CategoryService:
    """Service layer for category operations"""

    def __init__(self, db: Session):
        self.db = db

    def _others(self, exclude_id: UUID = None):
        query = self.db.query(Category)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query

    def _ensure_unique(self, name: str, exclude_id: UUID = None) -> None:
        if self._others(exclude_id).filter(Category.name == name).first():
            raise ConflictError("Category Already Exists")

    def _unique_slug(self, name: str, exclude_id: UUID = None) -> str:
        """Slug for the name; distinct names sharing a slug get a numeric suffix"""
        base = slugify(name)
        if not base:
            raise BadRequestError("Name must contain letters or digits")

        slug, counter = base, 2
        while self._others(exclude_id).filter(Category.slug == slug).first():
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def _commit(self) -> None:
        # Unique constraints still catch a concurrent insert of the same name
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Category Already Exists")

    def create_category(self, name: str) -> Category:
        self._ensure_unique(name)
        slug = self._unique_slug(name)

        category = Category(name=name, slug=slug)
        self.db.add(category)
        self._commit()
        self.db.refresh(category)

        logger.info(f"Created category {category.slug} ({category.id})")
        return category

    def update_category(self, category_id: UUID, name: str) -> Category:
        category = self.get_category_by_id(category_id)
        self._ensure_unique(name, exclude_id=category_id)
        slug = self._unique_slug(name, exclude_id=category_id)

        category.name = name
        category.slug = slug
        self._commit()
        self.db.refresh(category)
        return category

    def list_categories(self) -> List[Category]:
        """List all categories ordered by name"""
        return self.db.query(Category).order_by(Category.name).all()

    def get_category_by_id(self, category_id: UUID) -> Category:
        category = self.db.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def get_category_by_slug(self, slug: str) -> Category:
        category = self.db.query(Category).filter(Category.slug == slug).first()
        if not category:
            raise NotFoundError("Category not found")
        return category

    def delete_category(self, category_id: UUID) -> None:
        category = self.get_category_by_id(category_id)

        in_use = self.db.query(Product.id).filter(Product.category_id == category_id).first()
        if in_use:
            raise ConflictError("Category still has products")

        self.db.delete(category)
        self.db.commit()
        logger.info(f"Deleted category {category.slug} ({category_id})")

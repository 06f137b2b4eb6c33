from sqlalchemy import (
    Column, Text, Integer, Float, Boolean, LargeBinary, String, DateTime,
    ForeignKey, CheckConstraint, Index, Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, deferred
import uuid
from storefront.db.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False)
    # Loaded only when the photo endpoint asks for it
    photo = deferred(Column(LargeBinary))
    photo_content_type = Column(String(100))
    shipping = Column(Boolean)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("price > 0", name="positive_price"),
        CheckConstraint("quantity >= 0", name="non_negative_quantity"),
        Index("idx_products_category", "category_id"),
        Index("idx_products_slug", "slug"),
    )

    category = relationship("Category", lazy="joined")

    @property
    def has_photo(self) -> bool:
        return self.photo_content_type is not None

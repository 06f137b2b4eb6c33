from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, JSON, CheckConstraint, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
import uuid
from storefront.db.database import Base

ORDER_STATUSES = ("Not Processed", "Processing", "Shipped", "Delivered", "Cancelled")
DEFAULT_ORDER_STATUS = "Not Processed"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    buyer_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    payment = Column(JSON, nullable=False)
    status = Column(String(20), nullable=False, default=DEFAULT_ORDER_STATUS)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Not Processed', 'Processing', 'Shipped', 'Delivered', 'Cancelled')",
            name="order_status_valid"
        ),
        Index("idx_orders_buyer", "buyer_id"),
    )

    buyer = relationship("User", lazy="joined")
    items = relationship(
        "OrderItem",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    @validates("status")
    def validate_status(self, key, value):
        if value not in ORDER_STATUSES:
            raise ValueError(f"`{value}` is not a valid order status")
        return value

    @validates("items")
    def validate_item(self, key, item):
        item.position = len(self.items)
        return item

    @property
    def products(self):
        return [item.product for item in self.items]


class OrderItem(Base):
    """One cart line of an order; a product may appear on several lines"""
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_order_items_order", "order_id"),
    )

    product = relationship("Product", lazy="joined")

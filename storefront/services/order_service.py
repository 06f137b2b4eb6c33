from sqlalchemy.orm import Session
from typing import Any, Dict, List
from uuid import UUID
import logging

from storefront.core.errors import BadRequestError, NotFoundError
from storefront.models.order import Order, OrderItem, ORDER_STATUSES
from storefront.models.product import Product
from storefront.models.user import User

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for order operations"""

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, buyer: User, products: List[Product], payment: Dict[str, Any]) -> Order:
        """Persist an order for the given cart lines and gateway result"""
        if not products:
            raise BadRequestError("Order must contain at least one product.")

        order = Order(buyer_id=buyer.id, payment=payment)
        for product in products:
            order.items.append(OrderItem(product_id=product.id))

        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info(f"Created order {order.id} for {buyer.email} with {len(products)} item(s)")
        return order

    def list_buyer_orders(self, buyer: User) -> List[Order]:
        return self.db.query(Order).filter(Order.buyer_id == buyer.id).order_by(Order.created_at.desc(), Order.id).all()

    def list_all_orders(self) -> List[Order]:
        return self.db.query(Order).order_by(Order.created_at.desc(), Order.id).all()

    def update_status(self, order_id: UUID, status: str) -> Order:
        if status not in ORDER_STATUSES:
            raise BadRequestError(f"`{status}` is not a valid order status")

        order = self.db.get(Order, order_id)
        if not order:
            raise NotFoundError("Order not found")

        order.status = status
        self.db.commit()
        self.db.refresh(order)

        logger.info(f"Order {order.id} moved to '{status}'")
        return order

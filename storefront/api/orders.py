from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
from storefront.auth.dependencies import require_sign_in, is_admin
from storefront.db.database import get_db
from storefront.models.user import User
from storefront.schemas.common import ERROR_RESPONSES, ADMIN_ERROR_RESPONSES
from storefront.schemas.order import OrderStatusUpdate, OrderEnvelope, OrderListEnvelope
from storefront.services.order_service import OrderService

router = APIRouter(
    prefix="/order",
    tags=["Orders"]
)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency to get order service"""
    return OrderService(db)


@router.get(
    "/orders",
    response_model=OrderListEnvelope,
    summary="List own orders",
    description="Orders placed by the caller, newest first.",
    responses=ERROR_RESPONSES
)
async def list_orders(
    current_user: User = Depends(require_sign_in),
    order_service: OrderService = Depends(get_order_service)
):
    orders = order_service.list_buyer_orders(current_user)
    return {"success": True, "message": "Orders Fetched", "orders": orders}


@router.get(
    "/all-orders",
    response_model=OrderListEnvelope,
    summary="List all orders (admin only)",
    responses=ADMIN_ERROR_RESPONSES
)
async def list_all_orders(
    current_user: User = Depends(is_admin),
    order_service: OrderService = Depends(get_order_service)
):
    orders = order_service.list_all_orders()
    return {"success": True, "message": "All Orders Fetched", "orders": orders}


@router.put(
    "/order-status/{order_id}",
    response_model=OrderEnvelope,
    summary="Update order status (admin only)",
    description="""
    Move an order to another status.

    **Allowed values:** Not Processed, Processing, Shipped, Delivered, Cancelled
    """,
    responses={
        **ADMIN_ERROR_RESPONSES,
        404: {"description": "Order not found"}
    }
)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    current_user: User = Depends(is_admin),
    order_service: OrderService = Depends(get_order_service)
):
    order = order_service.update_status(order_id, data.status)
    return {"success": True, "message": "Order Status Updated", "order": order}

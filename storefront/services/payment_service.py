"""Checkout through the Stripe payment gateway.

The client-side SDK turns card details into a payment method id (the
nonce); the server charges the cart total against it and records the
gateway result on an order.
"""
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session
from typing import Any, Dict, List
from uuid import UUID
import logging

import stripe

from storefront.config import settings
from storefront.core.errors import APIError, BadRequestError, NotFoundError, PaymentError
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services.order_service import OrderService

logger = logging.getLogger(__name__)


def handle_stripe_error(error: stripe.StripeError, context: str) -> APIError:
    """Convert Stripe errors to API errors.

    Maps Stripe error types to HTTP status codes:
    - CardError: 402 (Payment Required) - card was declined
    - RateLimitError: 429 (Too Many Requests) - rate limited
    - InvalidRequestError: 400 (Bad Request) - invalid parameters
    - AuthenticationError: 500 - API key issue
    - APIConnectionError: 503 (Service Unavailable) - network issue
    - StripeError: 500 (Internal Server Error) - generic fallback
    """
    logger.error(f"Stripe error in {context}: {type(error).__name__}: {error}")

    if isinstance(error, stripe.CardError):
        return PaymentError(
            error.user_message or "Your card was declined. Please try a different payment method."
        )
    elif isinstance(error, stripe.RateLimitError):
        return APIError("Too many payment requests. Please wait a moment and try again.", status_code=429)
    elif isinstance(error, stripe.InvalidRequestError):
        return BadRequestError("Invalid payment request. Please check your details and try again.")
    elif isinstance(error, stripe.AuthenticationError):
        logger.critical(f"Stripe authentication failed: {error}")
        return APIError("Payment service configuration error. Please contact support.")
    elif isinstance(error, stripe.APIConnectionError):
        return APIError("Payment service temporarily unavailable. Please try again.", status_code=503)
    return APIError("Payment processing failed. Please try again or contact support.")


def calculate_total(products: List[Product]) -> Decimal:
    """Sum of the stored unit price of every cart line"""
    total = sum((Decimal(str(product.price)) for product in products), Decimal("0"))
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


class PaymentService:
    """Service layer for gateway tokens and checkout"""

    def __init__(self, db: Session):
        self.db = db
        self.order_service = OrderService(db)
        if settings.stripe_secret_key:
            stripe.api_key = settings.stripe_secret_key
        else:
            logger.warning("Stripe not configured (missing STRIPE_SECRET_KEY)")

    def generate_client_token(self) -> str:
        """Client secret the browser SDK uses to collect a payment method"""
        try:
            intent = stripe.SetupIntent.create(payment_method_types=["card"], usage="on_session")
        except stripe.StripeError as e:
            raise handle_stripe_error(e, "client token generation")
        return intent.client_secret

    def _resolve_cart(self, cart_ids: List[UUID]) -> List[Product]:
        if not cart_ids:
            raise BadRequestError("Cart is Required")

        found = {
            product.id: product
            for product in self.db.query(Product).filter(Product.id.in_(set(cart_ids))).all()
        }
        missing = [str(pid) for pid in cart_ids if pid not in found]
        if missing:
            raise NotFoundError(f"Product not found: {', '.join(sorted(set(missing)))}")
        return [found[pid] for pid in cart_ids]

    def checkout(self, buyer: User, nonce: str, cart_ids: List[UUID]) -> Order:
        """Charge the cart total and record the result on a new order.

        A declined card still produces an order whose payment is marked
        unsuccessful; the decline is then reported as a PaymentError.
        """
        products = self._resolve_cart(cart_ids)
        total = calculate_total(products)
        amount = to_minor_units(total)

        logger.info(f"Charging {amount} {settings.stripe_currency} for {len(products)} item(s) to {buyer.email}")

        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=settings.stripe_currency,
                payment_method=nonce,
                confirm=True,
                automatic_payment_methods={"enabled": True, "allow_redirects": "never"},
                metadata={"buyer_id": str(buyer.id)},
            )
        except stripe.CardError as e:
            payment = {
                "success": False,
                "message": e.user_message or str(e),
                "code": e.code,
                "amount": amount,
                "currency": settings.stripe_currency,
            }
            self.order_service.create_order(buyer, products, payment)
            raise handle_stripe_error(e, "checkout")
        except stripe.StripeError as e:
            raise handle_stripe_error(e, "checkout")

        payment = self._intent_result(intent)
        order = self.order_service.create_order(buyer, products, payment)

        if not payment["success"]:
            raise PaymentError(f"Payment not completed (status: {payment['status']})")
        return order

    @staticmethod
    def _intent_result(intent) -> Dict[str, Any]:
        return {
            "success": intent.status == "succeeded",
            "id": intent.id,
            "status": intent.status,
            "amount": intent.amount,
            "currency": intent.currency,
        }

"""
Three-step checkout, as the storefront's browser client runs it:

    CART_REVIEW -> DELIVERY_ADDRESS -> PAYMENT -> PLACED

Steps move forward with `proceed()` and backward with `back()`. PLACED is only
reachable through `place_order()`, and only after the API accepted the order.
Any failure on the way leaves the wizard on PAYMENT with `error` set.
"""
import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

import structlog

from services.cart_service.owner import OwnerKey
from services.order_service.pricing import OrderTotals, compute_totals, line_total
from shared.observability import storefront_checkout_total
from .client import StorefrontAPIError, StorefrontClient

logger = structlog.get_logger(__name__)

DEFAULT_SELLER_ID = 1
DELIVERY_WINDOW = timedelta(hours=1)
REQUIRED_ADDRESS_FIELDS = ("fullName", "phone", "address", "pincode")


class CheckoutStep(str, Enum):
    CART_REVIEW = "cart_review"
    DELIVERY_ADDRESS = "delivery_address"
    PAYMENT = "payment"
    PLACED = "placed"


_FORWARD = {
    CheckoutStep.CART_REVIEW: CheckoutStep.DELIVERY_ADDRESS,
    CheckoutStep.DELIVERY_ADDRESS: CheckoutStep.PAYMENT,
}
_BACKWARD = {
    CheckoutStep.PAYMENT: CheckoutStep.DELIVERY_ADDRESS,
    CheckoutStep.DELIVERY_ADDRESS: CheckoutStep.CART_REVIEW,
}


class CheckoutError(Exception):
    """A blocked transition. `step` is where the customer has to fix something."""

    def __init__(self, step: CheckoutStep, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.step = step
        self.message = message
        self.missing_fields = missing_fields or []


class CheckoutWizard:
    def __init__(self, client: StorefrontClient, owner: OwnerKey, seller_id: int = DEFAULT_SELLER_ID):
        self.client = client
        self.owner = owner
        self.seller_id = seller_id
        self.step = CheckoutStep.CART_REVIEW
        self.cart: list = []
        self.delivery_address = {
            "fullName": "",
            "phone": "",
            "address": "",
            "city": "Jaipur",
            "pincode": "",
            "landmark": "",
        }
        self.delivery_instructions = ""
        self.payment_method = "cod"
        self.error: Optional[CheckoutError] = None
        self.order: Optional[dict] = None

    # --- state ---

    async def load_cart(self) -> list:
        self.cart = await self.client.get_cart(self.owner)
        return self.cart

    @property
    def totals(self) -> OrderTotals:
        return compute_totals((Decimal(line["product"]["price"]), line["quantity"]) for line in self.cart)

    def set_address(self, **fields):
        unknown = set(fields) - set(self.delivery_address)
        if unknown:
            raise ValueError(f"Unknown address fields: {', '.join(sorted(unknown))}")
        self.delivery_address.update(fields)

    def set_payment_method(self, method: str):
        if method not in ("cod", "online"):
            raise ValueError(f"Unsupported payment method: {method}")
        self.payment_method = method

    def missing_address_fields(self) -> List[str]:
        return [f for f in REQUIRED_ADDRESS_FIELDS if not str(self.delivery_address.get(f) or "").strip()]

    # --- transitions ---

    def proceed(self) -> CheckoutStep:
        if self.step not in _FORWARD:
            raise CheckoutError(self.step, f"Cannot proceed from {self.step.value}")
        if self.step == CheckoutStep.CART_REVIEW and not self.cart:
            raise self._fail(CheckoutError(CheckoutStep.CART_REVIEW, "Your cart is empty"))
        self.error = None
        self.step = _FORWARD[self.step]
        return self.step

    def back(self) -> CheckoutStep:
        if self.step not in _BACKWARD:
            raise CheckoutError(self.step, f"Cannot go back from {self.step.value}")
        self.step = _BACKWARD[self.step]
        return self.step

    async def place_order(self) -> dict:
        if self.step != CheckoutStep.PAYMENT:
            raise CheckoutError(self.step, "Orders can only be placed from the payment step")

        missing = self.missing_address_fields()
        if missing:
            raise self._fail(CheckoutError(
                CheckoutStep.DELIVERY_ADDRESS,
                "Please fill in all delivery address fields",
                missing_fields=missing,
            ))
        if not self.cart:
            raise self._fail(CheckoutError(CheckoutStep.CART_REVIEW, "Your cart is empty"))

        order, items = self.build_order()
        try:
            created = await self.client.create_order(order, items)
        except StorefrontAPIError as e:
            storefront_checkout_total.labels(status="failed").inc()
            raise self._fail(CheckoutError(CheckoutStep.PAYMENT, f"Failed to place order: {e.detail}")) from e

        self.order = created
        self.error = None
        self.step = CheckoutStep.PLACED
        storefront_checkout_total.labels(status="placed").inc()
        logger.info("checkout_placed", order_id=created["id"], order_number=created["orderNumber"])

        try:
            await self.client.clear_cart(self.owner)
            self.cart = []
        except StorefrontAPIError as e:
            # The order stands; a stale cart is only cosmetic
            logger.warning("checkout_cart_not_cleared", order_id=created["id"], error=e.detail)
        return created

    def build_order(self):
        """The order header and line items exactly as they are sent to POST /api/orders."""
        totals = self.totals
        address = {k: v for k, v in self.delivery_address.items() if k != "landmark" or v}
        order = {
            "orderNumber": f"ORD{int(time.time() * 1000)}",
            "customerId": self.owner.user_id,
            "subtotal": str(totals.subtotal),
            "deliveryCharge": str(totals.delivery_charge),
            "total": str(totals.total),
            "paymentMethod": self.payment_method,
            "paymentStatus": "pending" if self.payment_method == "cod" else "paid",
            "status": "placed",
            "deliveryAddress": address,
            "deliveryInstructions": self.delivery_instructions or None,
            "estimatedDeliveryTime": (datetime.now(timezone.utc) + DELIVERY_WINDOW).isoformat(),
        }
        items = [
            {
                "productId": line["productId"],
                "sellerId": self.seller_id,
                "quantity": line["quantity"],
                "unitPrice": str(line["product"]["price"]),
                "totalPrice": str(line_total(Decimal(line["product"]["price"]), line["quantity"])),
            }
            for line in self.cart
        ]
        return order, items

    def _fail(self, error: CheckoutError) -> CheckoutError:
        self.error = error
        logger.warning("checkout_blocked", step=error.step.value, reason=error.message, missing=error.missing_fields)
        return error

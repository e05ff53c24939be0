import structlog

from shared.errors import InvalidRequestError
from shared.observability import storefront_orders_total, storefront_order_value
from shared.storage.base import Storage
from .models import Order, OrderItem
from .pricing import delivery_charge_for, line_total, money
from .schemas import OrderCreate, OrderDetailResponse, OrderItemCreate, OrderItemDetail, OrderItemResponse, OrderResponse
from services.catalog_service.schemas import ProductResponse

logger = structlog.get_logger(__name__)

class OrderService:
    def __init__(self, storage: Storage):
        self.storage = storage

    @staticmethod
    def verify_totals(data: OrderCreate, items: list[OrderItemCreate]):
        """Recomputes the client's arithmetic instead of trusting it."""
        for item in items:
            if money(item.total_price) != line_total(item.unit_price, item.quantity):
                raise InvalidRequestError(f"Line total for product {item.product_id} does not match unit price x quantity")

        subtotal = money(sum((money(i.total_price) for i in items), money(0)))
        if money(data.subtotal) != subtotal:
            raise InvalidRequestError(f"Subtotal {data.subtotal} does not match line items ({subtotal})")
        if money(data.delivery_charge) != delivery_charge_for(subtotal):
            raise InvalidRequestError(f"Delivery charge should be {delivery_charge_for(subtotal)}")
        if money(data.total) != subtotal + delivery_charge_for(subtotal):
            raise InvalidRequestError("Total must equal subtotal + delivery charge")

    async def create_order(self, data: OrderCreate, items: list[OrderItemCreate]):
        if not items:
            raise InvalidRequestError("Order must have items")
        try:
            self.verify_totals(data, items)
        except InvalidRequestError as e:
            storefront_orders_total.labels(status="rejected").inc()
            logger.warning("order_rejected", order_number=data.order_number, reason=e.message)
            raise
        if await self.storage.order_number_exists(data.order_number):
            storefront_orders_total.labels(status="rejected").inc()
            raise InvalidRequestError(f"Order number {data.order_number} already exists")

        order = Order(
            order_number=data.order_number,
            customer_id=data.customer_id,
            subtotal=money(data.subtotal),
            delivery_charge=money(data.delivery_charge),
            total=money(data.total),
            payment_method=data.payment_method.value,
            payment_status=data.payment_status.value,
            status=data.status,
            delivery_address=data.delivery_address.model_dump(),
            delivery_instructions=data.delivery_instructions,
            estimated_delivery_time=data.estimated_delivery_time,
        )
        # unit_price is the price the customer saw, frozen independently of Product.price
        order_items = [
            OrderItem(
                product_id=item.product_id,
                seller_id=item.seller_id,
                quantity=item.quantity,
                unit_price=money(item.unit_price),
                total_price=money(item.total_price),
            )
            for item in items
        ]
        order = await self.storage.create_order(order, order_items)

        storefront_orders_total.labels(status="created").inc()
        storefront_order_value.observe(float(order.total))
        logger.info("order_created", order_id=order.id, order_number=order.order_number, items=len(order_items), total=str(order.total))
        return order

    async def list_orders(self, customer_id: int | None = None):
        return await self.storage.list_orders(customer_id)

    async def get_order(self, order_id: int):
        order = await self.storage.get_order(order_id)
        if not order:
            return None

        products = await self.storage.get_products_by_ids(item.product_id for item in order.items)
        items = [
            OrderItemDetail(
                **OrderItemResponse.model_validate(item).model_dump(),
                product=self._product_view(products.get(item.product_id)),
            )
            for item in sorted(order.items, key=lambda i: i.id)
        ]
        return OrderDetailResponse(**OrderResponse.model_validate(order).model_dump(), items=items)

    @staticmethod
    def _product_view(product):
        return ProductResponse.model_validate(product) if product is not None else None

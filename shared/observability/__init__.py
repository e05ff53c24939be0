from .setup import setup_observability, configure_logging
from .metrics import (
    storefront_cart_mutations_total,
    storefront_orders_total,
    storefront_order_value,
    storefront_checkout_total
)

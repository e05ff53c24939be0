from prometheus_client import Counter, Histogram

# Business Metrics
storefront_cart_mutations_total = Counter(
    "storefront_cart_mutations_total",
    "Cart mutations processed",
    ["action"] # Labels: 'add', 'update', 'remove', 'clear'
)

storefront_orders_total = Counter(
    "storefront_orders_total",
    "Order creation attempts",
    ["status"] # Labels: 'created', 'rejected'
)

storefront_order_value = Histogram(
    "storefront_order_value",
    "Order totals in store currency",
    buckets=(25, 50, 100, 250, 500, 1000, 2500, 5000)
)

storefront_checkout_total = Counter(
    "storefront_checkout_total",
    "Checkouts driven by the checkout wizard",
    ["status"] # Labels: 'placed', 'failed'
)

"""Shared pytest fixtures: an in-memory store, a small catalog, and an in-process API client."""
import os

# Keep exporters and the /metrics registry out of test runs; read by shared.config.settings
os.environ.setdefault("ENABLE_TRACING", "false")
os.environ.setdefault("ENABLE_METRICS", "false")

from decimal import Decimal

import httpx
import pytest

from main import create_app
from services.catalog_service.schemas import CategoryCreate, ProductCreate
from services.catalog_service.service import CatalogService
from shared.storage import InMemoryStorage


class CatalogEditingStorage(InMemoryStorage):
    """In-memory store that can also drop products, to leave dangling cart and order rows behind."""

    async def delete_product(self, product_id: int) -> bool:
        return self.products.pop(product_id, None) is not None


@pytest.fixture
def storage():
    return CatalogEditingStorage()


@pytest.fixture
async def catalog(storage):
    """Two active categories, one hidden one, and a handful of products keyed by short name."""
    service = CatalogService(storage)
    groceries = await service.create_category(CategoryCreate(name="Groceries", slug="groceries", sort_order=2))
    snacks = await service.create_category(CategoryCreate(name="Snacks", slug="snacks", sort_order=1))
    await service.create_category(CategoryCreate(name="Archived", slug="archived", is_active=False))

    products = {}
    for key, data in {
        "rice": ProductCreate(
            name="Basmati Rice", name_hindi="बासमती चावल", description="Aged long-grain rice",
            price=Decimal("100.00"), stock=10, category_id=groceries.id, rating=Decimal("4.5"),
            is_featured=True,
        ),
        "dal": ProductCreate(
            name="Toor Dal", description="Split pigeon peas", price=Decimal("50.00"), stock=10,
            category_id=groceries.id, rating=Decimal("4.1"),
        ),
        "biscuits": ProductCreate(
            name="Glucose Biscuits", name_hindi="बिस्कुट", description="Classic tea-time biscuits",
            price=Decimal("20.00"), stock=100, category_id=snacks.id, rating=Decimal("4.8"),
        ),
        "ghee": ProductCreate(
            name="Desi Ghee", description="Clarified butter, 1 litre", price=Decimal("650.00"), stock=5,
            category_id=groceries.id, rating=Decimal("3.9"),
        ),
        "discontinued": ProductCreate(
            name="Old Rice Brand", description="No longer sold", price=Decimal("30.00"),
            category_id=groceries.id, is_active=False,
        ),
    }.items():
        products[key] = await service.create_product(data)

    return {"groceries": groceries, "snacks": snacks, "products": products}


@pytest.fixture
def app(storage):
    return create_app(storage=storage, tracing=False, metrics=False, seed=False)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def order_payload(lines, order_number="ORD1001", customer_id=None, **overrides):
    """Builds a POST /api/orders body from (product, quantity) pairs with consistent totals."""
    items = []
    subtotal = Decimal("0")
    for product, quantity in lines:
        total_price = Decimal(product.price) * quantity
        subtotal += total_price
        items.append({
            "productId": product.id,
            "sellerId": 1,
            "quantity": quantity,
            "unitPrice": str(product.price),
            "totalPrice": str(total_price),
        })
    delivery = Decimal("0") if subtotal >= 500 else Decimal("25")
    order = {
        "orderNumber": order_number,
        "customerId": customer_id,
        "subtotal": str(subtotal),
        "deliveryCharge": str(delivery),
        "total": str(subtotal + delivery),
        "paymentMethod": "cod",
        "paymentStatus": "pending",
        "status": "placed",
        "deliveryAddress": {
            "fullName": "Asha Verma",
            "phone": "9876543210",
            "address": "12 MI Road",
            "city": "Jaipur",
            "pincode": "302001",
        },
    }
    order.update(overrides)
    return {"order": order, "items": items}

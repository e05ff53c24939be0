"""DatabaseStorage against SQLite, covering what the in-memory double cannot: SQL, constraints, transactions."""
from decimal import Decimal

import pytest
from sqlalchemy.pool import StaticPool

from services.cart_service.models import CartItem
from services.cart_service.owner import OwnerKey
from services.cart_service.service import CartService
from services.catalog_service.schemas import CategoryCreate, ProductCreate, ProductFilters
from services.catalog_service.seed import seed_catalog
from services.catalog_service.service import CatalogService
from services.order_service.models import Order, OrderItem
from services.order_service.schemas import DeliveryAddress, OrderCreate, OrderItemCreate
from services.order_service.service import OrderService
from shared.errors import InvalidRequestError, StorageError
from shared.storage import DatabaseStorage


@pytest.fixture
async def db_storage():
    storage = DatabaseStorage.from_url(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await storage.init()
    yield storage
    await storage.close()


@pytest.fixture
async def products(db_storage):
    catalog = CatalogService(db_storage)
    category = await catalog.create_category(CategoryCreate(name="Groceries", slug="groceries"))
    rice = await catalog.create_product(ProductCreate(
        name="Basmati Rice", description="Aged long-grain rice", price=Decimal("100.00"),
        stock=10, category_id=category.id,
    ))
    dal = await catalog.create_product(ProductCreate(
        name="Toor Dal", description="Split pigeon peas", price=Decimal("50.00"),
        stock=10, category_id=category.id,
    ))
    return rice, dal


def make_order(number, lines, customer_id=None):
    items = [
        OrderItemCreate(product_id=p.id, quantity=q, unit_price=p.price, total_price=Decimal(p.price) * q)
        for p, q in lines
    ]
    subtotal = sum((i.total_price for i in items), Decimal("0"))
    delivery = Decimal("0") if subtotal >= 500 else Decimal("25")
    header = OrderCreate(
        order_number=number,
        customer_id=customer_id,
        subtotal=subtotal,
        delivery_charge=delivery,
        total=subtotal + delivery,
        delivery_address=DeliveryAddress(
            full_name="Asha Verma", phone="9876543210", address="12 MI Road", city="Jaipur", pincode="302001",
        ),
    )
    return header, items


async def test_search_is_case_insensitive_in_sql(db_storage, products):
    catalog = CatalogService(db_storage)
    found = await catalog.list_products(ProductFilters(search="PIGEON"))
    assert [p.name for p in found] == ["Toor Dal"]


@pytest.mark.parametrize("term", ["%", "_", "R_ce"])
async def test_search_treats_like_wildcards_literally(db_storage, products, term):
    catalog = CatalogService(db_storage)
    assert await catalog.list_products(ProductFilters(search=term)) == []


async def test_search_finds_literal_percent(db_storage, products):
    catalog = CatalogService(db_storage)
    await catalog.create_product(ProductCreate(name="Cashews 100% natural", price=Decimal("300.00")))
    found = await catalog.list_products(ProductFilters(search="100%"))
    assert [p.name for p in found] == ["Cashews 100% natural"]


async def test_cart_dedupes_in_database(db_storage, products):
    rice, _ = products
    cart = CartService(db_storage)
    owner = OwnerKey(session_id="s1")

    await cart.add_to_cart(owner, rice.id, 1)
    item = await cart.add_to_cart(owner, rice.id, 2)

    lines = await cart.list_cart(owner)
    assert len(lines) == 1
    assert item.quantity == 3
    assert lines[0].product.name == "Basmati Rice"


async def test_unique_constraint_backs_the_dedupe_rule(db_storage, products):
    rice, _ = products
    await db_storage.insert_cart_item(CartItem(product_id=rice.id, quantity=1, session_id="s1"))
    with pytest.raises(StorageError):
        await db_storage.insert_cart_item(CartItem(product_id=rice.id, quantity=1, session_id="s1"))


async def test_clear_cart_scoped_in_database(db_storage, products):
    rice, dal = products
    cart = CartService(db_storage)
    await cart.add_to_cart(OwnerKey(user_id=1), rice.id)
    await cart.add_to_cart(OwnerKey(user_id=1), dal.id)
    await cart.add_to_cart(OwnerKey(user_id=2), rice.id)

    assert await cart.clear_cart(OwnerKey(user_id=1)) == 2
    assert len(await cart.list_cart(OwnerKey(user_id=2))) == 1


async def test_cart_listing_skips_dangling_products(db_storage, products):
    rice, _ = products
    await db_storage.insert_cart_item(CartItem(product_id=rice.id, quantity=1, user_id=1))
    await db_storage.insert_cart_item(CartItem(product_id=9999, quantity=1, user_id=1))

    lines = await db_storage.list_cart_items(OwnerKey(user_id=1))
    assert [item.product_id for item, _ in lines] == [rice.id]


async def test_order_and_items_written_together(db_storage, products):
    rice, dal = products
    orders = OrderService(db_storage)
    header, items = make_order("ORD1", [(rice, 2), (dal, 1)])

    created = await orders.create_order(header, items)
    await db_storage.update_product(rice.id, {"price": Decimal("150.00")})
    detail = await orders.get_order(created.id)

    assert len(detail.items) == 2
    assert all(i.order_id == created.id for i in detail.items)
    assert detail.items[0].unit_price == Decimal("100.00")
    assert detail.items[0].product.price == Decimal("150.00")
    assert detail.total == Decimal("275.00")


async def test_failed_item_rolls_back_the_header(db_storage, products):
    rice, _ = products
    order = Order(
        order_number="ORD-BROKEN", subtotal=Decimal("100"), delivery_charge=Decimal("25"), total=Decimal("125"),
        delivery_address={"full_name": "A", "phone": "1", "address": "x", "city": "Jaipur", "pincode": "1"},
    )
    good = OrderItem(product_id=rice.id, quantity=1, unit_price=Decimal("100"), total_price=Decimal("100"))
    bad = OrderItem(product_id=None, quantity=1, unit_price=Decimal("100"), total_price=Decimal("100"))

    with pytest.raises(StorageError):
        await db_storage.create_order(order, [good, bad])

    assert await db_storage.list_orders() == []
    assert not await db_storage.order_number_exists("ORD-BROKEN")


async def test_list_orders_filters_by_customer(db_storage, products):
    rice, _ = products
    orders = OrderService(db_storage)
    await orders.create_order(*make_order("A1", [(rice, 1)], customer_id=1))
    await orders.create_order(*make_order("A2", [(rice, 1)], customer_id=2))

    assert [o.order_number for o in await orders.list_orders(1)] == ["A1"]
    assert len(await orders.list_orders()) == 2


async def test_seed_only_runs_on_empty_catalog(db_storage):
    assert await seed_catalog(db_storage) is True
    assert await seed_catalog(db_storage) is False
    assert len(await db_storage.list_categories()) == 4
    featured = await db_storage.list_products(featured=True)
    assert {p.name for p in featured} == {"Basmati Rice", "Full Cream Milk", "Aloo Bhujia"}


async def test_product_category_checked_in_database(db_storage, products):
    catalog = CatalogService(db_storage)
    with pytest.raises(InvalidRequestError):
        await catalog.create_product(ProductCreate(name="Stray Item", price=Decimal("10.00"), category_id=999))
    assert len(await db_storage.list_products()) == 2

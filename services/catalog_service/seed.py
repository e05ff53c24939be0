"""Demo catalog loaded on startup when SEED_DATABASE is set."""
from decimal import Decimal

import structlog

from shared.storage.base import Storage
from .schemas import CategoryCreate, ProductCreate
from .service import CatalogService

logger = structlog.get_logger(__name__)

CATEGORIES = [
    CategoryCreate(name="Groceries", slug="groceries", icon="shopping-basket", sort_order=1),
    CategoryCreate(name="Dairy", slug="dairy", icon="milk", sort_order=2),
    CategoryCreate(name="Snacks", slug="snacks", icon="cookie", sort_order=3),
    CategoryCreate(name="Household", slug="household", icon="home", sort_order=4),
]

# (category slug, product)
PRODUCTS = [
    ("groceries", ProductCreate(
        name="Basmati Rice", name_hindi="बासमती चावल", brand="India Gate", unit="1 kg",
        description="Aged long-grain basmati rice", price=Decimal("145.00"),
        original_price=Decimal("160.00"), stock=40, rating=Decimal("4.5"), review_count=12,
        is_featured=True,
    )),
    ("groceries", ProductCreate(
        name="Toor Dal", name_hindi="तूर दाल", brand="Tata Sampann", unit="1 kg",
        description="Unpolished split pigeon peas", price=Decimal("168.00"), stock=25,
        rating=Decimal("4.3"), review_count=7,
    )),
    ("dairy", ProductCreate(
        name="Full Cream Milk", name_hindi="दूध", brand="Amul", unit="500 ml",
        description="Pasteurised full cream milk", price=Decimal("34.00"), stock=60,
        rating=Decimal("4.6"), review_count=30, is_featured=True,
    )),
    ("dairy", ProductCreate(
        name="Paneer", name_hindi="पनीर", brand="Amul", unit="200 g",
        description="Fresh malai paneer", price=Decimal("90.00"), stock=15,
        rating=Decimal("4.4"), review_count=9,
    )),
    ("snacks", ProductCreate(
        name="Aloo Bhujia", name_hindi="आलू भुजिया", brand="Haldiram's", unit="400 g",
        description="Crispy spiced potato noodles", price=Decimal("99.00"),
        original_price=Decimal("110.00"), stock=35, rating=Decimal("4.7"), review_count=41,
        is_featured=True,
    )),
    ("snacks", ProductCreate(
        name="Glucose Biscuits", name_hindi="बिस्कुट", brand="Parle-G", unit="250 g",
        description="Classic glucose biscuits", price=Decimal("20.00"), stock=100,
        rating=Decimal("4.2"), review_count=18,
    )),
    ("household", ProductCreate(
        name="Dishwash Bar", name_hindi="बर्तन साबुन", brand="Vim", unit="3 x 200 g",
        description="Lemon dishwash bar", price=Decimal("60.00"), stock=50,
        rating=Decimal("4.1"), review_count=5,
    )),
]


async def seed_catalog(storage: Storage) -> bool:
    """Seeds categories and products into an empty catalog. Returns False if data already exists."""
    if await storage.list_categories(active_only=False):
        logger.info("seed_skipped", reason="catalog not empty")
        return False

    catalog = CatalogService(storage)
    category_ids = {}
    for category in CATEGORIES:
        created = await catalog.create_category(category)
        category_ids[created.slug] = created.id

    for slug, product in PRODUCTS:
        await catalog.create_product(product.model_copy(update={"category_id": category_ids[slug]}))

    logger.info("seed_completed", categories=len(CATEGORIES), products=len(PRODUCTS))
    return True

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from .models import Category, Product

class CatalogRepository:

    @staticmethod
    async def get_categories(db: AsyncSession, active_only: bool = True):
        stmt = select(Category).order_by(Category.sort_order, Category.id)
        if active_only:
            stmt = stmt.where(Category.is_active.is_(True))
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_category_by_id(db: AsyncSession, category_id: int):
        result = await db.execute(select(Category).where(Category.id == category_id))
        return result.scalars().first()

    @staticmethod
    async def create_category(db: AsyncSession, category: Category):
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def get_products(
        db: AsyncSession,
        category_id: int | None = None,
        search: str | None = None,
        featured: bool | None = None,
        active_only: bool = True,
    ):
        stmt = select(Product).order_by(Product.id)
        if active_only:
            stmt = stmt.where(Product.is_active.is_(True))
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if featured is not None:
            stmt = stmt.where(Product.is_featured == featured)
        if search:
            # autoescape keeps % and _ typed by the user literal
            stmt = stmt.where(
                or_(
                    Product.name.icontains(search, autoescape=True),
                    Product.name_hindi.icontains(search, autoescape=True),
                    Product.description.icontains(search, autoescape=True),
                )
            )
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def get_products_by_ids(db: AsyncSession, product_ids: list[int]):
        if not product_ids:
            return []
        result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
        return result.scalars().all()

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, values: dict):
        product = await CatalogRepository.get_product_by_id(db, product_id)
        if not product:
            return None
        for field, value in values.items():
            setattr(product, field, value)
        await db.commit()
        await db.refresh(product)
        return product

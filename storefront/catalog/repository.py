"""Product repository for database operations.

Provides CRUD operations and the catalog queries over the products table.
"""

from collections.abc import Sequence
from decimal import Decimal

import structlog
from sqlalchemy import and_, func, or_, select, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, undefer

from storefront.catalog.models import Category, Product

logger = structlog.get_logger()


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value is matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductRepository:
    """Repository for Product database operations.

    Photo bytes are a deferred column: every query here leaves them
    unloaded except ``get_photo``.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_all(
                category_ids=[category.id],
                min_price=Decimal("10"),
                max_price=Decimal("50"),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def delete(self, product: Product) -> None:
        """Delete a product.

        Args:
            product: Product to delete.
        """
        await self.session.delete(product)
        await self.session.flush()

    async def get_by_id(
        self,
        product_id: str,
        with_category: bool = False,
    ) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.
            with_category: Whether to eagerly load the category.

        Returns:
            Product if found, None otherwise.
        """
        query = select(Product).where(Product.id == product_id)

        if with_category:
            query = query.options(selectinload(Product.category))

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Product | None:
        """Get the first product with the given slug, category loaded.

        Args:
            slug: Product slug.

        Returns:
            Product if found, None otherwise.
        """
        query = (
            select(Product)
            .where(Product.slug == slug)
            .options(selectinload(Product.category))
            .order_by(Product.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_photo(self, product_id: str) -> Product | None:
        """Get a product with its photo bytes loaded.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        query = (
            select(Product)
            .where(Product.id == product_id)
            .options(undefer(Product.photo_data))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        category_ids: Sequence[str] | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        search: str | None = None,
        exclude_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
        with_category: bool = False,
    ) -> Sequence[Product]:
        """Find products newest first, with optional filters and paging.

        Args:
            category_ids: Keep products in any of these categories.
            min_price: Inclusive lower price bound.
            max_price: Inclusive upper price bound.
            search: Case-insensitive substring of name or description.
            exclude_id: Product ID to leave out.
            limit: Maximum results; None means unbounded.
            offset: Result offset for pagination.
            with_category: Whether to eagerly load categories.

        Returns:
            Sequence of matching products.
        """
        query = select(Product)

        # Build filter conditions
        conditions = []

        if category_ids:
            conditions.append(Product.category_id.in_(list(category_ids)))

        if min_price is not None:
            conditions.append(Product.price >= min_price)

        if max_price is not None:
            conditions.append(Product.price <= max_price)

        if exclude_id is not None:
            conditions.append(Product.id != exclude_id)

        if search:
            search_pattern = f"%{_escape_like(search)}%"
            conditions.append(
                or_(
                    Product.name.ilike(search_pattern, escape="\\"),
                    Product.description.ilike(search_pattern, escape="\\"),
                )
            )

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(Product.created_at.desc())

        # Pagination
        if limit is not None:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        # Eager loading
        if with_category:
            query = query.options(selectinload(Product.category))

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self) -> int:
        """Count all products exactly.

        Returns:
            Number of products.
        """
        result = await self.session.execute(select(func.count(Product.id)))
        return result.scalar_one()

    async def estimated_count(self) -> int:
        """Estimate the number of products without scanning the table.

        Uses the planner statistics on PostgreSQL. Falls back to an exact
        count on other dialects or when the table has not been analyzed.

        Returns:
            Approximate number of products.
        """
        if self.session.get_bind().dialect.name == "postgresql":
            result = await self.session.execute(
                text("SELECT reltuples::bigint FROM pg_class WHERE relname = :table"),
                {"table": Product.__tablename__},
            )
            estimate = result.scalar_one_or_none()
            if estimate is not None and estimate >= 0:
                return int(estimate)
            logger.debug("No planner estimate for products, counting rows")

        return await self.count()


class CategoryRepository:
    """Read-only access to category reference data."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get category by ID."""
        return await self.session.get(Category, category_id)

    async def get_by_slug(self, slug: str) -> Category | None:
        """Get category by slug."""
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

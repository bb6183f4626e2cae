"""Catalog service for product queries.

Read-side operations over the product table: listing, paging, filtering,
keyword search, related products and category pages.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Category, Product
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.domain.exceptions import NotFoundError, ValidationError

LIST_ALL_LIMIT = 12
PAGE_SIZE = 3
RELATED_LIMIT = 4
# Largest page whose offset still fits a signed 64-bit OFFSET.
MAX_PAGE = (2**63 - 1) // PAGE_SIZE


@dataclass
class ProductFilter:
    """Filter parameters for the product filter endpoint.

    Attributes:
        category_ids: Categories to keep; empty keeps every category.
        price_range: Inclusive ``(low, high)`` bounds; empty applies none.
    """

    category_ids: list[str] = field(default_factory=list)
    price_range: list[Any] = field(default_factory=list)

    def price_bounds(self) -> tuple[Decimal, Decimal] | None:
        """Parse the price range.

        Returns:
            ``(low, high)`` or None when no range was given.

        Raises:
            ValidationError: If the range is not two numbers.
        """
        if not self.price_range:
            return None
        if len(self.price_range) != 2:
            raise ValidationError("Price range must have exactly two values", field="radio")
        try:
            low, high = (Decimal(str(bound)) for bound in self.price_range)
        except InvalidOperation:
            raise ValidationError("Price range must be numeric", field="radio") from None
        return low, high


@dataclass
class CategoryProducts:
    """A category together with its products."""

    category: Category
    products: list[Product]


def parse_page(page: Any) -> int:
    """Normalize a 1-based page number.

    Absent or falsy pages mean page 1. Pages below 1 are clamped to 1 and
    pages past ``MAX_PAGE`` to ``MAX_PAGE``, which is always empty.

    Raises:
        ValidationError: If ``page`` is not an integer.
    """
    if not page:
        return 1
    try:
        number = int(page)
    except (TypeError, ValueError):
        raise ValidationError("Page must be a number", field="page") from None
    return min(max(number, 1), MAX_PAGE)


class CatalogService:
    """Service for catalog queries.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)
            newest = await service.list_all()
            page_two = await service.list_page(2)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = ProductRepository(session)
        self.categories = CategoryRepository(session)

    async def list_all(self) -> list[Product]:
        """Return the newest products, categories resolved."""
        products = await self.repository.find_all(limit=LIST_ALL_LIMIT, with_category=True)
        return list(products)

    async def list_page(self, page: Any = 1) -> list[Product]:
        """Return one page of products, newest first.

        Args:
            page: 1-based page number.

        Returns:
            Up to ``PAGE_SIZE`` products.
        """
        number = parse_page(page)
        products = await self.repository.find_all(
            limit=PAGE_SIZE,
            offset=(number - 1) * PAGE_SIZE,
        )
        return list(products)

    async def get_by_slug(self, slug: str) -> Product:
        """Get a product by slug, category resolved.

        Raises:
            NotFoundError: If no product has this slug.
        """
        product = await self.repository.get_by_slug(slug)
        if product is None:
            raise NotFoundError("Product", slug)
        return product

    async def filter_products(self, filters: ProductFilter) -> list[Product]:
        """Filter products by category and price.

        The result is not paginated.

        Args:
            filters: Category set and price range.

        Returns:
            Matching products, newest first.
        """
        bounds = filters.price_bounds()
        min_price, max_price = bounds if bounds else (None, None)
        products = await self.repository.find_all(
            category_ids=filters.category_ids,
            min_price=min_price,
            max_price=max_price,
        )
        return list(products)

    async def count(self) -> int:
        """Return the approximate number of products."""
        return await self.repository.estimated_count()

    async def search(self, keyword: str | None) -> list[Product]:
        """Case-insensitive substring search over name and description.

        Raises:
            ValidationError: If the keyword is empty.
        """
        if not keyword or not keyword.strip():
            raise ValidationError("Keyword is required", field="keyword")
        products = await self.repository.find_all(search=keyword)
        return list(products)

    async def related(self, product_id: str, category_id: str) -> list[Product]:
        """Return other products from the same category.

        Args:
            product_id: Product to leave out.
            category_id: Category to draw from.

        Returns:
            Up to ``RELATED_LIMIT`` products, categories resolved.
        """
        products = await self.repository.find_all(
            category_ids=[category_id],
            exclude_id=product_id,
            limit=RELATED_LIMIT,
            with_category=True,
        )
        return list(products)

    async def by_category_slug(self, slug: str) -> CategoryProducts:
        """Resolve a category by slug and return all of its products.

        Raises:
            NotFoundError: If the category does not exist.
        """
        category = await self.categories.get_by_slug(slug)
        if category is None:
            raise NotFoundError("Category", slug)
        products: Sequence[Product] = await self.repository.find_all(
            category_ids=[category.id],
            with_category=True,
        )
        return CategoryProducts(category=category, products=list(products))

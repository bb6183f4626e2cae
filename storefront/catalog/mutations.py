"""Product mutation service.

Create, update and delete products. Incoming fields are checked against an
ordered list of rules; the first rule that fails decides the error the
caller sees.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import structlog
from slugify import slugify
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import MAX_PHOTO_BYTES, Category, Product
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.domain.exceptions import NotFoundError, ValidationError

logger = structlog.get_logger()

TRUTHY = {"1", "true", "yes", "on"}

CENT = Decimal("0.01")
# Bounds of the price (Numeric(12, 2)) and quantity (int4) columns.
MAX_PRICE = Decimal(10) ** 10
MAX_QUANTITY = 2**31 - 1


@dataclass
class PhotoUpload:
    """An uploaded product photo."""

    data: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class ProductInput:
    """Raw product fields as submitted by a form.

    Values are kept as strings until every rule has passed.
    """

    name: str | None = None
    description: str | None = None
    price: str | None = None
    category: str | None = None
    quantity: str | None = None
    shipping: str | bool | None = None
    photo: PhotoUpload | None = None


# (is_valid, message, field)
Rule = tuple[Callable[[ProductInput], bool], str, str]


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _positive_number(value: str | None) -> bool:
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return False
    if not number.is_finite() or number <= 0 or number >= MAX_PRICE:
        return False
    # Numeric(12, 2) would round anything finer than a cent.
    return number == number.quantize(CENT)


def _non_negative_int(value: str | None) -> bool:
    try:
        number = int(str(value).strip())
    except ValueError:
        return False
    return 0 <= number <= MAX_QUANTITY


def _photo_fits(fields: ProductInput) -> bool:
    return fields.photo is None or fields.photo.size <= MAX_PHOTO_BYTES


REQUIRED_FIELD_RULES: list[Rule] = [
    (lambda f: _present(f.name), "Name is Required", "name"),
    (lambda f: _present(f.description), "Description is Required", "description"),
    (lambda f: _present(f.price), "Price is Required", "price"),
    (lambda f: _present(f.category), "Category is Required", "category"),
    (lambda f: _present(f.quantity), "Quantity is Required", "quantity"),
]

PHOTO_REQUIRED_RULE: Rule = (
    lambda f: f.photo is not None and f.photo.size > 0,
    "Photo is Required",
    "photo",
)

PHOTO_SIZE_RULE: Rule = (
    _photo_fits,
    "Photo should be less than 1MB",
    "photo",
)

VALUE_RULES: list[Rule] = [
    (lambda f: _positive_number(f.price), "Price must be a positive number", "price"),
    (
        lambda f: _non_negative_int(f.quantity),
        "Quantity must be a non-negative integer",
        "quantity",
    ),
]

CREATE_RULES: list[Rule] = [
    *REQUIRED_FIELD_RULES,
    PHOTO_REQUIRED_RULE,
    PHOTO_SIZE_RULE,
    *VALUE_RULES,
]

UPDATE_RULES: list[Rule] = [
    *REQUIRED_FIELD_RULES,
    PHOTO_SIZE_RULE,
    *VALUE_RULES,
]


def validate(fields: ProductInput, rules: list[Rule]) -> None:
    """Evaluate rules left to right.

    Raises:
        ValidationError: For the first rule that does not hold.
    """
    for is_valid, message, field in rules:
        if not is_valid(fields):
            raise ValidationError(message, field=field)


def make_slug(name: str) -> str:
    """Derive the URL slug for a product name."""
    return slugify(name)


def _parse_shipping(value: str | bool | None) -> bool:
    if isinstance(value, bool):
        return value
    return bool(value) and value.strip().lower() in TRUTHY


class ProductMutationService:
    """Service for product writes.

    Example usage:
        async with async_session_factory() as session:
            service = ProductMutationService(session)
            product = await service.create(
                ProductInput(
                    name="Desk Lamp",
                    description="Warm light",
                    price="29.99",
                    category=category.id,
                    quantity="10",
                    photo=PhotoUpload(data=png_bytes, content_type="image/png"),
                )
            )
            await session.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = ProductRepository(session)
        self.categories = CategoryRepository(session)

    async def _resolve_category(self, category_id: str) -> Category:
        category = await self.categories.get_by_id(category_id.strip())
        if category is None:
            raise ValidationError("Category not found", field="category")
        return category

    def _apply(self, product: Product, fields: ProductInput, category: Category) -> None:
        product.name = fields.name.strip()
        product.slug = make_slug(product.name)
        product.description = fields.description.strip()
        product.price = Decimal(fields.price.strip())
        product.quantity = int(fields.quantity.strip())
        product.shipping = _parse_shipping(fields.shipping)
        product.category_id = category.id
        product.category = category
        if fields.photo is not None:
            product.photo_data = fields.photo.data
            product.photo_content_type = fields.photo.content_type

    async def create(self, fields: ProductInput) -> Product:
        """Create a product.

        Raises:
            ValidationError: If a field is missing or invalid.
        """
        validate(fields, CREATE_RULES)
        category = await self._resolve_category(fields.category)

        product = Product()
        self._apply(product, fields, category)
        await self.repository.save(product)

        logger.info(
            "Product created",
            product_id=product.id,
            slug=product.slug,
            category_id=product.category_id,
        )
        return product

    async def update(self, product_id: str, fields: ProductInput) -> Product:
        """Replace the mutable fields of a product.

        The photo is only replaced when a new one is supplied.

        Raises:
            ValidationError: If a field is missing or invalid.
            NotFoundError: If the product does not exist.
        """
        validate(fields, UPDATE_RULES)
        category = await self._resolve_category(fields.category)

        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        self._apply(product, fields, category)
        await self.repository.save(product)

        logger.info(
            "Product updated",
            product_id=product.id,
            slug=product.slug,
            photo_replaced=fields.photo is not None,
        )
        return product

    async def delete(self, product_id: str) -> Product | None:
        """Delete a product.

        Returns:
            The product as it was before deletion, or None if it did not exist.
        """
        product = await self.repository.get_by_id(product_id, with_category=True)
        if product is None:
            logger.info("Delete of unknown product ignored", product_id=product_id)
            return None

        await self.repository.delete(product)
        logger.info("Product deleted", product_id=product_id)
        return product

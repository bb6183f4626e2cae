"""API request and response schemas.

Response envelopes keep the shape storefront clients already read:
``success`` plus ``message`` and the payload under ``product`` or
``products``.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import inspect

from storefront.catalog.models import Category, Product


# ============================================================================
# Common
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    error_code: str
    message: str
    details: dict[str, Any] | list[Any] = Field(default_factory=dict)
    request_id: str | None = None


# ============================================================================
# Catalog
# ============================================================================


class CategoryResponse(BaseModel):
    """Category as embedded in product responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class ProductResponse(BaseModel):
    """Product without its photo bytes."""

    id: str
    name: str
    slug: str
    description: str
    price: float
    quantity: int
    shipping: bool
    category_id: str
    category: CategoryResponse | None = None
    has_photo: bool | None = None
    created_at: datetime
    updated_at: datetime


def category_to_response(category: Category) -> CategoryResponse:
    """Convert Category model to response."""
    return CategoryResponse.model_validate(category)


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product model to response.

    The category is embedded only when it was loaded with the product.
    Photo bytes are never read.
    """
    state = inspect(product)
    category = None
    if "category" not in state.unloaded and product.category is not None:
        category = category_to_response(product.category)

    return ProductResponse(
        id=product.id,
        name=product.name,
        slug=product.slug,
        description=product.description,
        price=float(product.price),
        quantity=product.quantity,
        shipping=product.shipping,
        category_id=product.category_id,
        category=category,
        has_photo=product.photo_content_type is not None,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


class ProductsResponse(BaseModel):
    """A list of products."""

    success: bool = True
    message: str | None = None
    products: list[ProductResponse]


class AllProductsResponse(ProductsResponse):
    """The newest products with their count."""

    count_total: int = Field(serialization_alias="countTotal")


class SingleProductResponse(BaseModel):
    """One product."""

    success: bool = True
    message: str
    product: ProductResponse


class DeletedProductResponse(BaseModel):
    """Outcome of a delete; ``products`` is null when nothing was deleted."""

    success: bool = True
    message: str
    products: ProductResponse | None = None


class ProductCountResponse(BaseModel):
    """Approximate product count."""

    success: bool = True
    total: int


class CategoryProductsResponse(BaseModel):
    """A category page."""

    success: bool = True
    category: CategoryResponse
    products: list[ProductResponse]


class ProductFilterRequest(BaseModel):
    """Filter body.

    ``checked`` holds category IDs, ``radio`` an optional ``[low, high]``
    price range.
    """

    checked: list[str] = Field(default_factory=list)
    radio: list[float] = Field(default_factory=list)


# ============================================================================
# Payments
# ============================================================================


class CartItemSchema(BaseModel):
    """Cart line as submitted by the client.

    Extra keys (the product snapshot the client holds) are kept and stored
    with the order.
    """

    model_config = ConfigDict(extra="allow")

    price: float
    quantity: int = Field(default=1, ge=1)
    product: Any = None


class PaymentRequest(BaseModel):
    """Payment submission."""

    nonce: str | None = None
    cart: list[CartItemSchema] = Field(default_factory=list)


class ClientTokenResponse(BaseModel):
    """Client token for the payment form."""

    success: bool = True
    client_token: str = Field(serialization_alias="clientToken")


class PaymentResponse(BaseModel):
    """Payment outcome."""

    ok: bool = True
    order_id: str | None = None

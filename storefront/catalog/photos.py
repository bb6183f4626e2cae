"""Product photo access."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.repository import ProductRepository
from storefront.domain.exceptions import NotFoundError


@dataclass
class Photo:
    """Raw photo bytes and their MIME type."""

    data: bytes
    content_type: str


class PhotoService:
    """Serves the photo stored on a product."""

    def __init__(self, session: AsyncSession) -> None:
        self.repository = ProductRepository(session)

    async def fetch(self, product_id: str) -> Photo:
        """Get a product's photo.

        Raises:
            NotFoundError: If the product or its photo is missing.
        """
        product = await self.repository.get_photo(product_id)
        if product is None or not product.photo_data:
            raise NotFoundError("Photo", product_id)
        return Photo(
            data=product.photo_data,
            content_type=product.photo_content_type or "application/octet-stream",
        )

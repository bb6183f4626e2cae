"""Tests for product photo access."""

import pytest

from storefront.catalog.photos import PhotoService
from storefront.domain.exceptions import NotFoundError


class TestPhotoService:
    """Tests for PhotoService.fetch."""

    async def test_fetch_returns_bytes_and_type(self, session, categories, make_product):
        product = await make_product(
            "Lamp", categories["lamps"], photo=b"GIF89a-bytes", content_type="image/gif"
        )

        photo = await PhotoService(session).fetch(product.id)

        assert photo.data == b"GIF89a-bytes"
        assert photo.content_type == "image/gif"

    async def test_fetch_product_without_photo(self, session, categories, make_product):
        product = await make_product("Lamp", categories["lamps"])

        with pytest.raises(NotFoundError, match="Photo not found"):
            await PhotoService(session).fetch(product.id)

    async def test_fetch_unknown_product(self, session):
        with pytest.raises(NotFoundError):
            await PhotoService(session).fetch("no-such-id")

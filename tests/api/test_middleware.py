"""Tests for request IDs and error rendering."""

from storefront.api.products import get_catalog_service
from storefront.main import app


class FailingCatalog:
    async def count(self) -> int:
        raise RuntimeError("connection reset by peer")


class TestRequestId:
    """Tests for X-Request-ID correlation."""

    async def test_generated_when_absent(self, client):
        response = await client.get("/health")

        assert response.headers["X-Request-ID"]

    async def test_echoed_when_present(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    async def test_included_in_errors(self, client):
        response = await client.get(
            "/api/v1/product/product-category/missing",
            headers={"X-Request-ID": "req-404"},
        )

        assert response.json()["request_id"] == "req-404"


class TestInternalErrors:
    """Tests for unexpected failures."""

    async def test_detail_is_not_leaked(self, client):
        app.dependency_overrides[get_catalog_service] = lambda: FailingCatalog()

        response = await client.get("/api/v1/product/product-count")

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "INTERNAL_ERROR"
        assert data["message"] == "An internal error occurred"
        assert "connection reset" not in response.text

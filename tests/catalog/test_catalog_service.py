"""Tests for catalog queries."""

import pytest
from sqlalchemy import inspect

from storefront.catalog.service import (
    LIST_ALL_LIMIT,
    MAX_PAGE,
    CatalogService,
    ProductFilter,
    parse_page,
)
from storefront.domain.exceptions import NotFoundError, ValidationError


@pytest.fixture
async def seven_products(categories, make_product):
    """Seven products, oldest first: lamp-1..lamp-4 and chair-1..chair-3."""
    products = []
    for index in range(1, 5):
        products.append(
            await make_product(f"Lamp {index}", categories["lamps"], price=f"{index * 10}.00")
        )
    for index in range(1, 4):
        products.append(
            await make_product(f"Chair {index}", categories["chairs"], price=f"{index * 100}.00")
        )
    return products


class TestParsePage:
    """Tests for page number normalization."""

    @pytest.mark.parametrize("page,expected", [(None, 1), ("", 1), (0, 1), ("3", 3), (2, 2)])
    def test_valid_pages(self, page, expected):
        assert parse_page(page) == expected

    def test_negative_page_clamped(self):
        """Pages below 1 are not rejected."""
        assert parse_page("-4") == 1

    def test_huge_page_clamped(self):
        assert parse_page("99999999999999999999") == MAX_PAGE

    def test_non_numeric_page_rejected(self):
        with pytest.raises(ValidationError, match="Page must be a number"):
            parse_page("two")


class TestListing:
    """Tests for list_all and list_page."""

    async def test_list_all_caps_at_twelve(self, session, categories, make_product):
        """No more than 12 products come back, newest first."""
        for index in range(15):
            await make_product(f"Lamp {index}", categories["lamps"])

        products = await CatalogService(session).list_all()

        assert len(products) == LIST_ALL_LIMIT
        assert products[0].name == "Lamp 14"
        assert [p.created_at for p in products] == sorted(
            (p.created_at for p in products), reverse=True
        )

    async def test_list_all_resolves_category(self, session, seven_products):
        products = await CatalogService(session).list_all()

        assert all(p.category.id == p.category_id for p in products)

    async def test_list_all_leaves_photo_unloaded(self, session_factory, seven_products):
        """Photo bytes are not read by list queries."""
        async with session_factory() as fresh:
            products = await CatalogService(fresh).list_all()

        assert products
        assert all("photo_data" in inspect(p).unloaded for p in products)

    async def test_page_two_returns_ranks_four_to_six(self, session, seven_products):
        """Page 2 with size 3 is the 4th to 6th newest."""
        newest_first = list(reversed(seven_products))

        page = await CatalogService(session).list_page(2)

        assert [p.id for p in page] == [p.id for p in newest_first[3:6]]

    async def test_falsy_page_is_first_page(self, session, seven_products):
        service = CatalogService(session)

        assert [p.id for p in await service.list_page(None)] == [
            p.id for p in await service.list_page(1)
        ]

    async def test_page_past_end_is_empty(self, session, seven_products):
        assert await CatalogService(session).list_page(10) == []

    async def test_huge_page_is_empty(self, session, seven_products):
        assert await CatalogService(session).list_page("99999999999999999999") == []


class TestLookup:
    """Tests for get_by_slug and by_category_slug."""

    async def test_get_by_slug(self, session, seven_products):
        product = await CatalogService(session).get_by_slug("chair-2")

        assert product.name == "Chair 2"
        assert product.category.slug == "chairs"

    async def test_get_by_slug_missing(self, session, seven_products):
        with pytest.raises(NotFoundError):
            await CatalogService(session).get_by_slug("sofa")

    async def test_by_category_slug(self, session, seven_products):
        result = await CatalogService(session).by_category_slug("lamps")

        assert result.category.id == "cat-lamps"
        assert len(result.products) == 4
        assert all(p.category_id == "cat-lamps" for p in result.products)

    async def test_by_category_slug_missing(self, session, seven_products):
        with pytest.raises(NotFoundError, match="Category not found"):
            await CatalogService(session).by_category_slug("sofas")


class TestFilter:
    """Tests for filter_products."""

    async def test_empty_filter_returns_everything(self, session, categories, make_product):
        """No categories and no range returns all products, uncapped."""
        for index in range(14):
            await make_product(f"Lamp {index}", categories["lamps"])

        products = await CatalogService(session).filter_products(ProductFilter())

        assert len(products) == 14

    async def test_filter_by_category(self, session, seven_products):
        products = await CatalogService(session).filter_products(
            ProductFilter(category_ids=["cat-chairs"])
        )

        assert {p.name for p in products} == {"Chair 1", "Chair 2", "Chair 3"}

    async def test_filter_by_price_range_is_inclusive(self, session, seven_products):
        products = await CatalogService(session).filter_products(
            ProductFilter(price_range=[20, 100])
        )

        assert {p.name for p in products} == {"Lamp 2", "Lamp 3", "Lamp 4", "Chair 1"}

    async def test_filter_by_category_and_price(self, session, seven_products):
        products = await CatalogService(session).filter_products(
            ProductFilter(category_ids=["cat-lamps", "cat-chairs"], price_range=[35, 150])
        )

        assert {p.name for p in products} == {"Lamp 4", "Chair 1"}

    async def test_filter_rejects_malformed_range(self, session, seven_products):
        with pytest.raises(ValidationError):
            await CatalogService(session).filter_products(ProductFilter(price_range=[10]))


class TestSearch:
    """Tests for keyword search."""

    async def test_case_insensitive_substring_of_description(self, session, categories, make_product):
        await make_product("Lamp A", categories["lamps"], description="Hand-blown Murano glass shade")
        await make_product("Lamp B", categories["lamps"], description="Steel shade")

        products = await CatalogService(session).search("mURAno")

        assert [p.name for p in products] == ["Lamp A"]

    async def test_matches_name(self, session, seven_products):
        products = await CatalogService(session).search("chair")

        assert len(products) == 3

    async def test_wildcards_match_literally(self, session, categories, make_product):
        await make_product("Lamp 100%", categories["lamps"])
        await make_product("Lamp 1000", categories["lamps"])

        products = await CatalogService(session).search("100%")

        assert [p.name for p in products] == ["Lamp 100%"]

    @pytest.mark.parametrize("keyword", ["", "   ", None])
    async def test_empty_keyword_rejected(self, session, keyword):
        with pytest.raises(ValidationError, match="Keyword is required"):
            await CatalogService(session).search(keyword)


class TestRelatedAndCount:
    """Tests for related and count."""

    async def test_related_excludes_product_and_caps_at_four(self, session, categories, make_product):
        lamps = [await make_product(f"Lamp {i}", categories["lamps"]) for i in range(6)]
        await make_product("Chair", categories["chairs"])
        target = lamps[2]

        related = await CatalogService(session).related(target.id, "cat-lamps")

        assert len(related) == 4
        assert all(p.category_id == "cat-lamps" for p in related)
        assert target.id not in {p.id for p in related}
        assert all(p.category.slug == "lamps" for p in related)

    async def test_count(self, session, seven_products):
        assert await CatalogService(session).count() == 7

"""Shared fixtures: in-memory database, seed data, API client."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count

import httpx
import pytest
from slugify import slugify
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import storefront.payments.models  # noqa: F401
from storefront.api.auth import sign_token
from storefront.api.payments import get_payment_gateway
from storefront.catalog.models import Category, Product
from storefront.infrastructure.database import Base, get_session
from storefront.main import app

from fakes import FakePaymentGateway

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    """Session used by tests to seed and inspect data."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def categories(session) -> dict[str, Category]:
    """Seed two categories."""
    lamps = Category(id="cat-lamps", name="Lamps", slug="lamps")
    chairs = Category(id="cat-chairs", name="Chairs", slug="chairs")
    session.add_all([lamps, chairs])
    await session.commit()
    return {"lamps": lamps, "chairs": chairs}


@pytest.fixture
def make_product(session):
    """Factory that inserts products with strictly increasing created_at."""
    ticks = count(1)

    async def _make(
        name: str,
        category: Category,
        price: str = "10.00",
        description: str | None = None,
        quantity: int = 5,
        photo: bytes | None = None,
        content_type: str | None = None,
    ) -> Product:
        product = Product(
            name=name,
            slug=slugify(name),
            description=description or f"{name} for everyday use",
            price=Decimal(price),
            quantity=quantity,
            shipping=False,
            category_id=category.id,
            photo_data=photo,
            photo_content_type=content_type,
            created_at=BASE_TIME + timedelta(minutes=next(ticks)),
        )
        session.add(product)
        await session.commit()
        return product

    return _make


@pytest.fixture
def fake_gateway() -> FakePaymentGateway:
    """Gateway double that settles every sale."""
    return FakePaymentGateway()


@pytest.fixture
async def client(session_factory, fake_gateway):
    """HTTP client against the app with test database and gateway."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization headers for a catalog admin."""
    return {"Authorization": f"Bearer {sign_token('admin-1', 'admin')}"}


@pytest.fixture
def buyer_headers() -> dict[str, str]:
    """Authorization headers for a signed-in shopper."""
    return {"Authorization": f"Bearer {sign_token('buyer-42', 'user')}"}

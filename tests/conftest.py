"""Shared test fixtures for the pizzeria order API."""

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import pizzeria.models  # noqa: F401  (registers tables on Base.metadata)
from pizzeria.database import Base, get_db
from pizzeria.models import Product
from pizzeria.schemas import ProductOut

TEST_PRODUCTS = [
    {"item_id": "P1", "name": "Margherita", "price": 9.50, "description": "Tomato, mozzarella", "category": "Pizzas"},
    {"item_id": "P2", "name": "Diavola", "price": 12.00, "description": "Spicy salami", "category": "Pizzas"},
    {"item_id": "D1", "name": "Lemonade", "price": 3.25, "description": "Fresh", "category": "Drinks"},
    {"item_id": "S1", "name": "Focaccia", "price": 4.75, "description": "Rosemary", "category": "Sides"},
]


class RecordingCatalog:
    """In-memory product lookup that records every requested id."""

    def __init__(self, products: list[ProductOut]):
        self.products = {p.item_id: p for p in products}
        self.lookups: list[str] = []

    async def get_product(self, item_id: str):
        self.lookups.append(item_id)
        return self.products.get(item_id)


@pytest.fixture
def recording_catalog() -> RecordingCatalog:
    """Catalog fake holding TEST_PRODUCTS."""
    return RecordingCatalog([ProductOut(**row) for row in TEST_PRODUCTS])


@pytest.fixture
async def engine():
    """Fresh in-memory database with all tables created."""
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
def session_maker(engine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded(session_maker) -> list[dict]:
    """Insert TEST_PRODUCTS into the catalog."""
    async with session_maker() as session:
        session.add_all(Product(**row) for row in TEST_PRODUCTS)
        await session.commit()
    return TEST_PRODUCTS


@pytest.fixture
async def session(session_maker, seeded) -> AsyncSession:
    """A session on a database whose catalog is already seeded."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker, seeded):
    """HTTP client talking to the app with get_db bound to the test database."""
    from pizzeria.main import app

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

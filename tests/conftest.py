"""Test config and shared fixtures."""
import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Callable, List, Optional, Sequence
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from framework.repository.base import IRepository
from apps.orders.models import Order, OrderItem, Product


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class ScriptedRepository(IRepository):
    """Test double: records every call and answers from canned results."""

    def __init__(self, results: Sequence[Any] = (), entity: Any = None):
        self.results = list(results)
        self.entity = entity
        self.calls: List[tuple] = []

    async def add(self, entity):
        self.calls.append(("add", entity))
        return entity

    async def update(self, entity):
        self.calls.append(("update", entity))
        return entity

    async def get(self, id):
        self.calls.append(("get", id))
        return self.entity

    async def all(self):
        self.calls.append(("all",))
        return list(self.results)

    async def find(self, predicate):
        self.calls.append(("find", predicate))
        return list(self.results)

    async def save_changes(self):
        self.calls.append(("save_changes",))

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def scripted_repository() -> Callable[..., ScriptedRepository]:
    """Factory for scripted repository doubles."""
    return ScriptedRepository


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[Callable[[], AsyncSession], None]:
    """Session factory over a fresh in-memory database; each session is a separate unit of work."""
    import apps.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client; every request gets its own session from the test database."""
    from apps.orders.api.router import get_db

    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def sample_products(async_session: AsyncSession) -> List[Product]:
    """Two catalog products."""
    products = [Product(name="Widget", price=2.5), Product(name="Gadget", price=10.0)]
    async_session.add_all(products)
    await async_session.commit()
    return products


@pytest.fixture
async def dated_orders(
    async_session: AsyncSession,
    sample_products: List[Product],
    now: datetime
) -> List[Order]:
    """Orders placed two days ago, yesterday and today; each has one item."""
    widget = sample_products[0]
    orders = []
    for days_ago, quantity in ((2, 1), (1, 2), (0, 4)):
        order = Order(
            customer_name=f"customer-{days_ago}",
            order_date=now - timedelta(days=days_ago),
            total=quantity * widget.price
        )
        order.items = [
            OrderItem(product_id=widget.id, quantity=quantity, unit_price=widget.price)
        ]
        orders.append(order)
    async_session.add_all(orders)
    await async_session.commit()
    return orders


def make_order(customer_name: str = "Ada", total: float = 10.0, order_date: Optional[datetime] = None) -> Order:
    return Order(
        customer_name=customer_name,
        total=total,
        order_date=order_date or datetime.now(timezone.utc)
    )


@pytest.fixture
def order_factory() -> Callable[..., Order]:
    return make_order

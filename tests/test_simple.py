"""
Simple test cases to verify test configuration.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.repository.unit_of_work import UnitOfWork
from apps.orders.models import Product
from apps.orders.repository import ProductRepository


async def test_app_exists(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200


async def test_database_session(async_session: AsyncSession):
    """Test that database session works."""
    assert async_session is not None
    result = await async_session.execute(text("SELECT 1"))
    assert result.scalar() == 1


async def test_unit_of_work_shares_session_and_commits(session_factory):
    async with session_factory() as session:
        async with UnitOfWork(session) as uow:
            repo = uow.get_repository(ProductRepository)
            assert uow.get_repository(ProductRepository) is repo
            assert repo.session is session
            await repo.add(Product(name="Widget", price=1))

    async with session_factory() as session:
        assert [p.name for p in await ProductRepository(session).all()] == ["Widget"]


async def test_unit_of_work_rolls_back_on_error(session_factory):
    async with session_factory() as session:
        with pytest.raises(RuntimeError):
            async with UnitOfWork(session) as uow:
                await uow.get_repository(ProductRepository).add(Product(name="Widget", price=1))
                raise RuntimeError("abort")
        assert not session.new

    async with session_factory() as session:
        assert await ProductRepository(session).all() == []

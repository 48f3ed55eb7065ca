"""Order module repository implementations."""

from typing import Any, List, Optional
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.repository.base import BaseRepository, IRepository
from .models import Order, OrderItem, Product


class ProductRepository(BaseRepository[Product]):
    """Product repository."""

    def __init__(self, session):
        super().__init__(session, Product)


class OrderRepository(IRepository[Order]):
    """
    Order repository whose queries also load items and their products.

    Wraps a generic BaseRepository[Order] on the same session; only ``find``
    differs, every other operation is delegated unchanged.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._inner = BaseRepository(session, Order)

    async def add(self, entity: Order) -> Order:
        return await self._inner.add(entity)

    async def update(self, entity: Order) -> Order:
        return await self._inner.update(entity)

    async def get(self, id: Any) -> Optional[Order]:
        return await self._inner.get(id)

    async def all(self) -> List[Order]:
        return await self._inner.all()

    async def find(self, predicate: ColumnElement[bool]) -> List[Order]:
        """Find orders with items and products fetched in the same call, newest first."""
        statement = (
            select(Order)
            .where(predicate)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .order_by(Order.order_date.desc())
        )
        result = await self.session.exec(statement)
        return list(result.all())

    async def save_changes(self) -> None:
        await self._inner.save_changes()


def build_order_repository(session: AsyncSession, eager_loading: bool = True) -> IRepository[Order]:
    """Pick the order repository implementation for a session."""
    if eager_loading:
        return OrderRepository(session)
    return BaseRepository(session, Order)

from fastapi import APIRouter, Depends, Query
from sqlalchemy import inspect
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Any, Dict, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field
import uuid
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.repository.base import IRepository
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from ..models import Order, OrderItem, Product
from ..repository import OrderRepository, ProductRepository, build_order_repository
from ..service import OrderService

router = APIRouter()


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)


class OrderLine(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class OrderCreate(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    lines: List[OrderLine] = Field(min_length=1)


class OrderRename(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)


async def get_db():
    """Get database session (one per request)."""
    manager = DatabaseManager.get_instance()
    async for session in manager.sql.get_session():
        yield session


def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    """Dependency: create UnitOfWork."""
    return UnitOfWork(session=db)


def get_order_repository(uow: UnitOfWork = Depends(get_uow)) -> IRepository[Order]:
    """Dependency: order repository; loading variant unless disabled in settings."""
    return uow.get_repository(
        OrderRepository,
        factory=lambda session: build_order_repository(
            session, eager_loading=settings.ORDER_REPOSITORY_EAGER_LOADING
        )
    )


def get_product_repository(uow: UnitOfWork = Depends(get_uow)) -> IRepository[Product]:
    """Dependency: product repository."""
    return uow.get_repository(ProductRepository)


def get_order_service(
    orders: IRepository[Order] = Depends(get_order_repository),
    products: IRepository[Product] = Depends(get_product_repository)
) -> OrderService:
    """Dependency: create OrderService."""
    return OrderService(orders, products)


def as_utc(value: datetime) -> datetime:
    # SQLite and MySQL return naive datetimes; stored values are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def product_to_dict(product: Product) -> Dict[str, Any]:
    return {"id": str(product.id), "name": product.name, "price": product.price}


def item_to_dict(item: OrderItem) -> Dict[str, Any]:
    data = {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "quantity": item.quantity,
        "unit_price": item.unit_price,
    }
    if "product" not in inspect(item).unloaded and item.product is not None:
        data["product"] = product_to_dict(item.product)
    return data


def order_to_dict(order: Order) -> Dict[str, Any]:
    """Serialize an order; items appear only when already loaded."""
    data = {
        "id": str(order.id),
        "customer_name": order.customer_name,
        "order_date": as_utc(order.order_date).isoformat(),
        "total": order.total,
    }
    if "items" not in inspect(order).unloaded:
        data["items"] = [item_to_dict(item) for item in order.items]
    return data


@router.post("/products")
async def create_product(
    payload: ProductCreate,
    service: OrderService = Depends(get_order_service)
):
    """Create a catalog product."""
    product = await service.add_product(payload.name, payload.price)
    return ResponseModel.success(data=product_to_dict(product))


@router.get("/products")
async def list_products(service: OrderService = Depends(get_order_service)):
    """List all products."""
    products = await service.list_products()
    return ResponseModel.success(data=[product_to_dict(p) for p in products])


@router.post("")
async def place_order(
    payload: OrderCreate,
    service: OrderService = Depends(get_order_service)
):
    """Place an order priced from the current catalog."""
    order = await service.place_order(
        payload.customer_name,
        [(line.product_id, line.quantity) for line in payload.lines]
    )
    return ResponseModel.success(data=order_to_dict(order))


@router.get("")
async def list_orders(service: OrderService = Depends(get_order_service)):
    """List all orders (without items)."""
    orders = await service.list_orders()
    return ResponseModel.success(data=[order_to_dict(o) for o in orders])


@router.get("/recent")
async def recent_orders(
    days: int = Query(default=7, ge=0),
    service: OrderService = Depends(get_order_service)
):
    """Orders placed within the last N days."""
    orders = await service.recent_orders(days)
    return ResponseModel.success(data=[order_to_dict(o) for o in orders])


@router.get("/summary")
async def sales_summary(
    days: int = Query(default=30, ge=0),
    service: OrderService = Depends(get_order_service)
):
    """Order count, revenue and average value for the last N days."""
    return ResponseModel.success(data=await service.sales_summary(days))


@router.get("/{order_id}")
async def get_order(
    order_id: uuid.UUID,
    service: OrderService = Depends(get_order_service)
):
    """Get one order with its items."""
    order = await service.get_order_details(order_id)
    return ResponseModel.success(data=order_to_dict(order))


@router.patch("/{order_id}")
async def rename_customer(
    order_id: uuid.UUID,
    payload: OrderRename,
    service: OrderService = Depends(get_order_service)
):
    """Change the customer name on an order."""
    order = await service.rename_customer(order_id, payload.customer_name)
    return ResponseModel.success(data=order_to_dict(order))

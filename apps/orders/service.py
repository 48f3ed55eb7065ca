from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid
from framework.exceptions.errors import NotFoundError
from framework.exceptions.handler import BusinessException
from framework.logging.logger import get_logger
from framework.repository.base import IRepository
from .models import Order, OrderItem, Product

logger = get_logger("order_service")


class OrderService:
    """Order use cases; talks to storage only through the repository interface."""

    def __init__(self, orders: IRepository[Order], products: IRepository[Product]):
        self.orders = orders
        self.products = products

    async def add_product(self, name: str, price: float) -> Product:
        if price < 0:
            raise BusinessException("Price must not be negative", code=422)
        product = await self.products.add(Product(name=name, price=price))
        await self.products.save_changes()
        logger.info(f"Product {name} created with id {product.id}")
        return product

    async def list_products(self) -> List[Product]:
        return await self.products.all()

    async def place_order(
        self,
        customer_name: str,
        lines: Sequence[Tuple[uuid.UUID, int]],
        order_date: Optional[datetime] = None
    ) -> Order:
        """Create an order from (product_id, quantity) lines priced at current product prices."""
        if not lines:
            raise BusinessException("An order needs at least one line", code=422)

        items = []
        for product_id, quantity in lines:
            if quantity <= 0:
                raise BusinessException(f"Quantity must be positive for product {product_id}", code=422)
            product = await self.products.get(product_id)
            if product is None:
                raise NotFoundError("Product", product_id)
            item = OrderItem(product_id=product.id, quantity=quantity, unit_price=product.price)
            item.product = product
            items.append(item)

        order = Order(
            customer_name=customer_name,
            order_date=order_date or datetime.now(timezone.utc),
            total=round(sum(i.quantity * i.unit_price for i in items), 2)
        )
        order.items = items

        await self.orders.add(order)
        await self.orders.save_changes()
        logger.info(f"Order {order.id} placed by {customer_name}, total {order.total}")
        return order

    async def get_order(self, order_id: uuid.UUID) -> Order:
        order = await self.orders.get(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    async def get_order_details(self, order_id: uuid.UUID) -> Order:
        """Single order through ``find`` so a loading repository includes its items."""
        matches = await self.orders.find(Order.id == order_id)
        if not matches:
            raise NotFoundError("Order", order_id)
        return matches[0]

    async def list_orders(self) -> List[Order]:
        return await self.orders.all()

    async def recent_orders(self, days: int, now: Optional[datetime] = None) -> List[Order]:
        """Orders placed within the last ``days`` days."""
        if days < 0:
            raise BusinessException("days must not be negative", code=422)
        since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        return await self.orders.find(Order.order_date >= since)

    async def rename_customer(self, order_id: uuid.UUID, customer_name: str) -> Order:
        order = await self.get_order(order_id)
        order.customer_name = customer_name
        order = await self.orders.update(order)
        await self.orders.save_changes()
        logger.info(f"Order {order_id} customer renamed to {customer_name}")
        return order

    async def sales_summary(self, days: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Count, revenue and average order value over the last ``days`` days."""
        orders = await self.recent_orders(days, now)
        revenue = round(sum(o.total for o in orders), 2)
        count = len(orders)
        return {
            "days": days,
            "count": count,
            "revenue": revenue,
            "average": round(revenue / count, 2) if count else 0.0,
        }

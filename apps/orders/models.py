from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime, timezone
import uuid


class Product(SQLModel, table=True):
    """Catalog product referenced by order items."""
    __tablename__ = "products"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=255)
    price: float = Field(ge=0, description="Unit price")


class Order(SQLModel, table=True):
    """Customer order; items are only loaded on demand or by OrderRepository.find."""
    __tablename__ = "orders"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    customer_name: str = Field(index=True, max_length=255)
    order_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Placed at (UTC)"
    )
    total: float = Field(default=0, description="Sum of item quantity * unit_price")

    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


class OrderItem(SQLModel, table=True):
    """Order line: product, quantity and the price at the time of ordering."""
    __tablename__ = "order_items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    quantity: int = Field(default=1, gt=0)
    unit_price: float

    order: Optional[Order] = Relationship(back_populates="items")
    product: Optional[Product] = Relationship()

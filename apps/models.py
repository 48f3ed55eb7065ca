"""
Model registration: import every table model here so SQLModel.metadata knows it
before tables are created.
"""
from apps.orders.models import Product, Order, OrderItem

__all__ = ["Product", "Order", "OrderItem"]

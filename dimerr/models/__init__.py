# dimerr/models/__init__.py

# 1. Declarative base
from dimerr.database import Base

# 2. Customers
from .customers import Customer

# 3. Catalog
from .products import Brand, Campaign, Product

# 4. Orders and payments
from .orders import (
    Order,
    OrderItem,
    Payment,
    OrderStatus,
    PaymentType,
)

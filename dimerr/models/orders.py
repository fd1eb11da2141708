# dimerr/models/orders.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Enum, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dimerr.database import Base


# --- Enums ---
class PaymentType(str, enum.Enum):
    CASH = "cash"
    CREDIT = "credit"     # "utang"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"   # Balance still open
    PAID = "paid"


# --- Order header ---
class Order(Base):
    __tablename__ = "orders"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=True)

    order_date = Column(Date, nullable=False)

    total_srp = Column(Numeric(10, 2), default=0.00, nullable=False)
    total_cost = Column(Numeric(10, 2), default=0.00, nullable=False)
    profit = Column(Numeric(10, 2), default=0.00)

    payment_type = Column(Enum(PaymentType), default=PaymentType.CASH, nullable=False)
    status = Column(Enum(OrderStatus), default=OrderStatus.PAID, nullable=False)
    paid_amount = Column(Numeric(10, 2), default=0.00, nullable=False)
    due_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    customer = relationship("Customer")
    brand = relationship("Brand")
    campaign = relationship("Campaign")

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    payments = relationship(
        "Payment",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="Payment.id",
    )


# --- Line items ---
class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Numeric(10, 2), nullable=False)
    srp_each = Column(Numeric(10, 2), nullable=False)
    cost_each = Column(Numeric(10, 2), nullable=False)
    line_total_srp = Column(Numeric(10, 2), nullable=False)
    line_total_cost = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")


# --- Payments (append-only log of balance changes) ---
class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("seller_id", "operation_id", name="uq_payments_seller_operation"),
        {'extend_existing': True},
    )

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    channel = Column(String, nullable=True)  # Free text: Cash, GCash, Bank...

    # Client-generated key, unique per seller; a retried request with the same key is not re-applied
    operation_id = Column(String, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="payments")

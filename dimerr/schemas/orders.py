from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
from enum import Enum
from decimal import Decimal
from datetime import date, datetime

from dimerr.utils.totals import to_decimal


# Mirrors the model enums
class PaymentTypeSchema(str, Enum):
    CASH = "cash"
    CREDIT = "credit"


class OrderStatusSchema(str, Enum):
    PENDING = "pending"
    PAID = "paid"


# --- Models for creation ---

class OrderItemCreate(BaseModel):
    product_id: Optional[int] = None
    quantity: Decimal = Decimal(0)
    srp_each: Decimal = Decimal(0)
    # Omitted: derived from the brand margin
    cost_each: Optional[Decimal] = None

    @field_validator("product_id", mode="before")
    @classmethod
    def blank_product(cls, value):
        if value in ("", 0, "0"):
            return None
        return value

    @field_validator("quantity", "srp_each", mode="before")
    @classmethod
    def lenient_number(cls, value):
        return to_decimal(value)

    @field_validator("cost_each", mode="before")
    @classmethod
    def lenient_cost(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return to_decimal(value)


class OrderCreate(BaseModel):
    customer_id: Optional[int] = None
    brand_id: Optional[int] = None
    campaign_id: Optional[int] = None
    order_date: Optional[date] = None
    payment_type: PaymentTypeSchema = PaymentTypeSchema.CASH
    due_date: Optional[date] = None
    items: List[OrderItemCreate] = []

    @field_validator("payment_type", mode="before")
    @classmethod
    def accept_utang(cls, value):
        # "utang" is the Filipino name the first releases stored
        if isinstance(value, str) and value.strip().lower() == "utang":
            return PaymentTypeSchema.CREDIT
        return value

    @field_validator("campaign_id", "due_date", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if value == "":
            return None
        return value


class PaymentCreate(BaseModel):
    amount: Union[Decimal, str, None] = None
    channel: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, max_length=64)


class MarkPaidRequest(BaseModel):
    channel: Optional[str] = None
    # Also log a Payment row covering the remaining balance
    record_payment: bool = True
    operation_id: Optional[str] = Field(default=None, max_length=64)


# --- Models for reading ---

class DueStatusRead(BaseModel):
    days_until: int
    label: str


class OrderItemRead(BaseModel):
    id: int
    product_id: int
    product_label: str
    quantity: Decimal
    srp_each: Decimal
    cost_each: Decimal
    line_total_srp: Decimal
    line_total_cost: Decimal


class PaymentRead(BaseModel):
    id: int
    order_id: int
    amount: Decimal
    channel: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderRead(BaseModel):
    id: int
    customer_id: int
    customer_name: Optional[str] = None
    brand_id: int
    brand_name: Optional[str] = None
    campaign_id: Optional[int] = None
    campaign_name: Optional[str] = None

    order_date: date
    payment_type: PaymentTypeSchema
    status: OrderStatusSchema
    status_label: str
    due_date: Optional[date] = None
    due_status: Optional[DueStatusRead] = None

    total_srp: Decimal
    total_cost: Decimal
    profit: Decimal
    paid_amount: Decimal
    remaining: Decimal

    created_at: Optional[datetime] = None

    items: List[OrderItemRead] = []
    payments: List[PaymentRead] = []


class PaymentResult(BaseModel):
    order: OrderRead
    payment: Optional[PaymentRead] = None
    overpayment: Decimal = Decimal(0)
    warning: Optional[str] = None
    # True when operation_id matched an earlier request and nothing was applied
    replayed: bool = False


# --- Preview (price the form without saving) ---

class PricedLine(BaseModel):
    product_id: Optional[int] = None
    quantity: Decimal
    srp_each: Decimal
    cost_each: Decimal
    line_total_srp: Decimal
    line_total_cost: Decimal


class OrderPreview(BaseModel):
    items: List[PricedLine]
    total_srp: Decimal
    total_cost: Decimal
    profit: Decimal

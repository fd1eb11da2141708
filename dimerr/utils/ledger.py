# dimerr/utils/ledger.py
"""
Balance and status bookkeeping for orders.

The functions accept anything exposing ``total_srp`` and ``paid_amount``
(an ORM Order or a LedgerState) and never mutate it; callers persist the
returned LedgerUpdate.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from zoneinfo import ZoneInfo

from dimerr.config import SELLER_TIMEZONE
from dimerr.models.orders import OrderStatus
from dimerr.utils.totals import to_decimal


class InvalidPaymentError(ValueError):
    """Payment amount is missing, non-numeric or not positive."""


class LedgerState(BaseModel):
    total_srp: Decimal = Decimal(0)
    paid_amount: Decimal = Decimal(0)

    class Config:
        frozen = True


class LedgerUpdate(BaseModel):
    new_paid_amount: Decimal
    new_status: OrderStatus
    # Amount a Payment row should record for this change
    payment_amount: Decimal = Decimal(0)
    channel: Optional[str] = None
    overpayment: Decimal = Decimal(0)
    warning: Optional[str] = None

    class Config:
        frozen = True


class DueStatus(BaseModel):
    days_until: int
    label: str

    class Config:
        frozen = True


def status_for(paid_amount, total_srp) -> OrderStatus:
    if to_decimal(paid_amount) >= to_decimal(total_srp):
        return OrderStatus.PAID
    return OrderStatus.PENDING


def compute_remaining(order) -> Decimal:
    remaining = to_decimal(order.total_srp) - to_decimal(order.paid_amount)
    return remaining if remaining > 0 else Decimal(0)


def status_label(order) -> str:
    """Display label: 'partial' is derived here and never stored."""
    if status_for(order.paid_amount, order.total_srp) == OrderStatus.PAID:
        return "paid"
    if to_decimal(order.paid_amount) > 0:
        return "partial"
    return "pending"


def _parse_amount(amount) -> Decimal:
    if amount is None or isinstance(amount, bool):
        raise InvalidPaymentError("Please enter a number for the payment.")
    try:
        value = Decimal(str(amount).strip())
    except ArithmeticError:
        raise InvalidPaymentError("Please enter a number for the payment.")
    if not value.is_finite():
        raise InvalidPaymentError("Please enter a number for the payment.")
    if value <= 0:
        raise InvalidPaymentError("Payment must be greater than zero.")
    return value


def apply_payment(order, amount, channel: Optional[str] = None) -> LedgerUpdate:
    """
    Add ``amount`` to the order's paid-to-date.

    Paying more than the remaining balance is allowed (rounding corrections,
    tips); the update then carries ``overpayment`` and a warning for the caller.
    """
    value = _parse_amount(amount)
    channel = channel.strip() if channel and channel.strip() else None

    remaining = compute_remaining(order)
    new_paid = to_decimal(order.paid_amount) + value

    overpayment = Decimal(0)
    warning = None
    if value > remaining:
        overpayment = value - remaining
        warning = f"Amount exceeds the remaining balance ({remaining:,.2f}) by {overpayment:,.2f}."

    return LedgerUpdate(
        new_paid_amount=new_paid,
        new_status=status_for(new_paid, order.total_srp),
        payment_amount=value,
        channel=channel,
        overpayment=overpayment,
        warning=warning,
    )


def mark_fully_paid(order, channel: Optional[str] = None) -> LedgerUpdate:
    """Settle the whole balance in one step. paid_amount never goes down."""
    paid = to_decimal(order.paid_amount)
    total = to_decimal(order.total_srp)
    return LedgerUpdate(
        new_paid_amount=max(paid, total),
        new_status=OrderStatus.PAID,
        payment_amount=compute_remaining(order),
        channel=channel.strip() if channel and channel.strip() else None,
    )


def seller_today() -> date:
    return datetime.now(ZoneInfo(SELLER_TIMEZONE)).date()


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    # fromisoformat only reads a "Z" suffix from Python 3.11 on
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def compute_due_status(due_date, today=None) -> Optional[DueStatus]:
    """
    Whole calendar days between today and the due date. Times of day are
    dropped on both sides, so any time on the due date itself is 'Due today'.
    """
    if due_date is None or due_date == "":
        return None

    due = _as_date(due_date)
    current = _as_date(today) if today is not None else seller_today()
    days = (due - current).days

    if days > 0:
        label = f"Due in {days} day(s)"
    elif days == 0:
        label = "Due today"
    else:
        label = f"Overdue by {abs(days)} day(s)"

    return DueStatus(days_until=days, label=label)

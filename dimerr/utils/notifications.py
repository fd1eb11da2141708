# dimerr/utils/notifications.py
from datetime import date
from typing import Optional

from pydantic import BaseModel

from dimerr.config import CURRENCY_SYMBOL
from dimerr.utils.ledger import compute_remaining


class Reminder(BaseModel):
    order_id: int
    title: str
    body: str


def format_money(amount) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"


def build_reminder(order) -> Reminder:
    customer_name = order.customer.name if order.customer else "Customer"
    due = order.due_date.isoformat() if isinstance(order.due_date, date) else (order.due_date or "")
    return Reminder(
        order_id=order.id,
        title=f"Credit due: {customer_name}",
        body=f"Balance {format_money(compute_remaining(order))} • Due on {due}",
    )


def soonest_due(orders) -> Optional[object]:
    """Order with the earliest due date; orders without one are ignored."""
    dated = [o for o in orders if o.due_date is not None]
    if not dated:
        return None
    return min(dated, key=lambda o: (o.due_date, o.id))

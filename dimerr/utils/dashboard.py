# dimerr/utils/dashboard.py
from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import BaseModel

from dimerr.models.orders import OrderStatus, PaymentType
from dimerr.utils.ledger import compute_remaining
from dimerr.utils.totals import to_decimal

UNASSIGNED_BRAND = "Unassigned brand"


class BrandRollup(BaseModel):
    brand_id: Optional[int] = None
    name: str
    order_count: int = 0
    total_srp: Decimal = Decimal(0)
    total_profit: Decimal = Decimal(0)


class DashboardSummary(BaseModel):
    total_srp: Decimal = Decimal(0)
    total_cost: Decimal = Decimal(0)
    total_profit: Decimal = Decimal(0)
    order_count: int = 0
    paid_orders: int = 0
    pending_credit_orders: int = 0
    pending_credit_amount: Decimal = Decimal(0)
    brands: List[BrandRollup] = []


def order_profit(order) -> Decimal:
    """Stored profit, recomputed from SRP and cost when missing or zero."""
    stored = to_decimal(order.profit)
    if stored:
        return stored
    return to_decimal(order.total_srp) - to_decimal(order.total_cost)


def summarize_orders(orders: Iterable) -> DashboardSummary:
    """
    Single pass over every order of a seller. Pending credit counts every
    open credit order, past-due ones included.
    """
    summary = {
        "total_srp": Decimal(0),
        "total_cost": Decimal(0),
        "total_profit": Decimal(0),
        "order_count": 0,
        "paid_orders": 0,
        "pending_credit_orders": 0,
        "pending_credit_amount": Decimal(0),
    }
    brand_map = {}

    for o in orders:
        srp = to_decimal(o.total_srp)
        profit = order_profit(o)

        summary["total_srp"] += srp
        summary["total_cost"] += to_decimal(o.total_cost)
        summary["total_profit"] += profit
        summary["order_count"] += 1

        if o.status == OrderStatus.PAID:
            summary["paid_orders"] += 1

        if o.payment_type == PaymentType.CREDIT and o.status == OrderStatus.PENDING:
            summary["pending_credit_orders"] += 1
            summary["pending_credit_amount"] += compute_remaining(o)

        brand = getattr(o, "brand", None)
        key = brand.id if brand is not None else None
        if key not in brand_map:
            brand_map[key] = BrandRollup(
                brand_id=key,
                name=brand.name if brand is not None else UNASSIGNED_BRAND,
            )
        rollup = brand_map[key]
        rollup.order_count += 1
        rollup.total_srp += srp
        rollup.total_profit += profit

    brands = sorted(brand_map.values(), key=lambda b: b.total_srp, reverse=True)
    return DashboardSummary(**summary, brands=brands)

# dimerr/utils/totals.py
"""
Order Composer arithmetic: line totals, order totals and the brand-margin
cost auto-fill. Everything here is pure; the routers persist the results.
"""
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional

from pydantic import BaseModel

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")


class OrderValidationError(ValueError):
    """The order cannot be submitted as drafted."""


def to_decimal(value) -> Decimal:
    """Coerce form input to Decimal. Missing or non-numeric values count as zero."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return result if result.is_finite() else Decimal(0)


def cost_from_margin(srp, margin_percent) -> Optional[Decimal]:
    """
    Cost per unit implied by the brand margin, rounded to centavos.
    Returns None when the brand has no usable margin (missing, < 0 or >= 100).
    """
    if margin_percent is None:
        return None
    margin = to_decimal(margin_percent)
    if margin < 0 or margin >= 100:
        return None
    cost = to_decimal(srp) * (Decimal(100) - margin) / Decimal(100)
    return cost.quantize(CENTS, rounding=ROUND_HALF_UP)


# --- View-model for one line of the order form ---
class LineDraft(BaseModel):
    product_id: Optional[int] = None
    quantity: Decimal = Decimal(0)
    srp_each: Decimal = Decimal(0)
    cost_each: Decimal = Decimal(0)

    class Config:
        frozen = True

    @property
    def line_total_srp(self) -> Decimal:
        return self.quantity * self.srp_each

    @property
    def line_total_cost(self) -> Decimal:
        return self.quantity * self.cost_each

    @property
    def is_valid(self) -> bool:
        return bool(self.product_id) and self.quantity > 0


class OrderDraft(BaseModel):
    customer_id: Optional[int] = None
    brand_id: Optional[int] = None
    order_date: Optional[date] = None
    lines: List[LineDraft] = []

    class Config:
        frozen = True


class Totals(BaseModel):
    total_srp: Decimal = ZERO
    total_cost: Decimal = ZERO
    profit: Decimal = ZERO

    class Config:
        frozen = True

    def __add__(self, other: "Totals") -> "Totals":
        return Totals(
            total_srp=self.total_srp + other.total_srp,
            total_cost=self.total_cost + other.total_cost,
            profit=self.profit + other.profit,
        )


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def compute_totals(line_items: Iterable) -> Totals:
    """
    Sum quantity * srp_each and quantity * cost_each over the lines.
    Accepts LineDraft objects, ORM rows or plain dicts.
    """
    total_srp = Decimal(0)
    total_cost = Decimal(0)

    for item in line_items:
        qty = to_decimal(_field(item, "quantity"))
        total_srp += qty * to_decimal(_field(item, "srp_each"))
        total_cost += qty * to_decimal(_field(item, "cost_each"))

    return Totals(
        total_srp=total_srp,
        total_cost=total_cost,
        profit=total_srp - total_cost,
    )


def make_line(product_id=None, quantity=None, srp_each=None, cost_each=None, margin_percent=None) -> LineDraft:
    """
    Build a LineDraft from raw input. When cost_each is omitted the brand
    margin fills it in; with no margin either, cost is zero.
    """
    if cost_each is None or (isinstance(cost_each, str) and not cost_each.strip()):
        derived = cost_from_margin(srp_each, margin_percent)
        cost = derived if derived is not None else Decimal(0)
    else:
        cost = to_decimal(cost_each)

    return LineDraft(
        product_id=product_id or None,
        quantity=to_decimal(quantity),
        srp_each=to_decimal(srp_each),
        cost_each=cost,
    )


def update_line_srp(line: LineDraft, srp, margin_percent=None) -> LineDraft:
    """SRP edit on a form line: the brand margin, when usable, overwrites cost_each."""
    changes = {"srp_each": to_decimal(srp)}
    derived = cost_from_margin(srp, margin_percent)
    if derived is not None:
        changes["cost_each"] = derived
    return line.model_copy(update=changes)


def validate_order(draft: OrderDraft) -> List[LineDraft]:
    """
    Reject drafts that cannot be saved and return the lines worth keeping
    (those with a product and a positive quantity).
    """
    if not draft.customer_id or not draft.brand_id or not draft.order_date:
        raise OrderValidationError("Please select customer, brand and order date.")

    lines = [line for line in draft.lines if line.is_valid]
    if not lines:
        raise OrderValidationError("Please add at least one product with quantity.")
    return lines

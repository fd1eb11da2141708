# dimerr/utils/invoice.py
from decimal import Decimal

from dimerr.models.orders import OrderStatus, PaymentType
from dimerr.utils.ledger import compute_remaining
from dimerr.utils.totals import to_decimal

INVOICE_NOTES = (
    "Thank you for your purchase! For questions about this invoice, "
    "please contact your DTC seller."
)


def format_quantity(quantity) -> str:
    qty = to_decimal(quantity)
    if qty == qty.to_integral_value():
        return str(qty.quantize(Decimal(1)))
    return str(qty.normalize())


def payment_label(order) -> str:
    if order.payment_type == PaymentType.CREDIT:
        state = "Paid" if order.status == OrderStatus.PAID else "Pending"
        return f"Credit ({state})"
    return "Cash"


def build_invoice(order) -> dict:
    """Read-only invoice view of an order, shared by the HTML and PDF renderers."""
    items = []
    for it in order.items:
        line_total = it.line_total_srp
        if line_total is None:
            line_total = to_decimal(it.srp_each) * to_decimal(it.quantity)
        items.append({
            "label": it.product.label if it.product else "Unknown product",
            "quantity": to_decimal(it.quantity),
            "srp_each": to_decimal(it.srp_each),
            "line_total": to_decimal(line_total),
        })

    subtotal = sum((line["line_total"] for line in items), Decimal(0))

    # Cash orders were paid in full at the counter
    if order.payment_type == PaymentType.CREDIT:
        paid = to_decimal(order.paid_amount)
    else:
        paid = subtotal

    balance = subtotal - paid
    if balance < 0:
        balance = Decimal(0)

    return {
        "number": f"INV-{order.id}",
        "order_date": order.order_date.isoformat() if order.order_date else "—",
        "payment_label": payment_label(order),
        "due_date": order.due_date.isoformat() if order.due_date else None,
        "customer_name": order.customer.name if order.customer else "Unknown customer",
        "items": items,
        "subtotal": subtotal,
        "paid_amount": paid,
        "balance": balance,
        "remaining": compute_remaining(order),
        "notes": INVOICE_NOTES,
    }

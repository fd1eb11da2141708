from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from dimerr.models import Brand, Order, OrderItem, Payment, PaymentType
from dimerr.schemas.orders import OrderCreate
from dimerr.utils.ledger import LedgerUpdate, status_for
from dimerr.utils.totals import (
    LineDraft,
    OrderDraft,
    Totals,
    compute_totals,
    make_line,
    validate_order,
)


def order_query(db: Session, seller_id: str):
    """Orders of one seller with everything the read schema embeds."""
    return (
        db.query(Order)
        .options(
            joinedload(Order.customer),
            joinedload(Order.brand),
            joinedload(Order.campaign),
            joinedload(Order.items).joinedload(OrderItem.product),
            joinedload(Order.payments),
        )
        .filter(Order.seller_id == seller_id)
    )


def get_order(db: Session, order_id: int, seller_id: str) -> Optional[Order]:
    return order_query(db, seller_id).filter(Order.id == order_id).first()


def get_payment_by_operation(db: Session, operation_id: str, seller_id: str) -> Optional[Payment]:
    return db.query(Payment).filter(
        Payment.operation_id == operation_id,
        Payment.seller_id == seller_id,
    ).first()


def price_lines(order_in: OrderCreate, brand: Optional[Brand]) -> List[LineDraft]:
    """Submitted lines as drafts; omitted costs come from the brand margin."""
    margin = brand.default_margin_percent if brand is not None else None
    return [
        make_line(
            product_id=item.product_id,
            quantity=item.quantity,
            srp_each=item.srp_each,
            cost_each=item.cost_each,
            margin_percent=margin,
        )
        for item in order_in.items
    ]


def draft_from(order_in: OrderCreate, lines: List[LineDraft]) -> OrderDraft:
    return OrderDraft(
        customer_id=order_in.customer_id,
        brand_id=order_in.brand_id,
        order_date=order_in.order_date,
        lines=lines,
    )


def checked_lines(order_in: OrderCreate, brand: Optional[Brand]) -> List[LineDraft]:
    """Raises OrderValidationError; returns only the lines worth saving."""
    return validate_order(draft_from(order_in, price_lines(order_in, brand)))


def build_items(lines: List[LineDraft], seller_id: str) -> List[OrderItem]:
    return [
        OrderItem(
            seller_id=seller_id,
            product_id=line.product_id,
            quantity=line.quantity,
            srp_each=line.srp_each,
            cost_each=line.cost_each,
            line_total_srp=line.line_total_srp,
            line_total_cost=line.line_total_cost,
        )
        for line in lines
    ]


def apply_header(order: Order, order_in: OrderCreate, totals: Totals) -> None:
    is_credit = order_in.payment_type.value == PaymentType.CREDIT.value

    order.customer_id = order_in.customer_id
    order.brand_id = order_in.brand_id
    order.campaign_id = order_in.campaign_id
    order.order_date = order_in.order_date
    order.payment_type = PaymentType.CREDIT if is_credit else PaymentType.CASH
    order.due_date = order_in.due_date if is_credit else None

    order.total_srp = totals.total_srp
    order.total_cost = totals.total_cost
    order.profit = totals.profit


def create_order(db: Session, order_in: OrderCreate, lines: List[LineDraft], seller_id: str) -> Order:
    totals = compute_totals(lines)
    order = Order(seller_id=seller_id)
    apply_header(order, order_in, totals)

    # Cash is settled at the counter; credit starts with nothing paid
    if order.payment_type == PaymentType.CASH:
        order.paid_amount = totals.total_srp
    else:
        order.paid_amount = 0
    order.status = status_for(order.paid_amount, order.total_srp)

    order.items = build_items(lines, seller_id)
    db.add(order)
    db.commit()
    return order


def update_order(db: Session, order: Order, order_in: OrderCreate, lines: List[LineDraft], seller_id: str) -> Order:
    """
    Rewrite the header and replace every line item (delete-all, reinsert).
    Both steps share one commit.
    """
    totals = compute_totals(lines)
    apply_header(order, order_in, totals)

    paid = order.paid_amount or 0
    if order.payment_type == PaymentType.CASH and paid < totals.total_srp:
        order.paid_amount = totals.total_srp
    order.status = status_for(order.paid_amount, order.total_srp)

    order.items.clear()
    db.flush()
    order.items.extend(build_items(lines, seller_id))

    db.commit()
    return order


def record_ledger_update(
    db: Session,
    order: Order,
    update: LedgerUpdate,
    seller_id: str,
    operation_id: Optional[str] = None,
    log_payment: bool = True,
) -> Optional[Payment]:
    """Payment row and balance change are committed together."""
    payment = None
    if log_payment and update.payment_amount > 0:
        payment = Payment(
            seller_id=seller_id,
            order_id=order.id,
            amount=update.payment_amount,
            channel=update.channel,
            operation_id=operation_id,
        )
        db.add(payment)

    order.paid_amount = update.new_paid_amount
    order.status = update.new_status

    db.commit()
    if payment is not None:
        db.refresh(payment)
    return payment

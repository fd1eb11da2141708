# dimerr/routers/credit.py
"""Credit ("utang") tracker: open balances, partial payments, settlement."""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import asc
from sqlalchemy.orm import Session
from typing import List, Optional

from dimerr.database import get_db
from dimerr.models import Order, OrderStatus, PaymentType
from dimerr.schemas.orders import MarkPaidRequest, OrderRead, PaymentCreate, PaymentRead, PaymentResult
from dimerr.security import get_current_seller, Seller
from dimerr.crud import orders as crud_orders
from dimerr.routers.orders import get_order_or_404, order_read
from dimerr.utils.ledger import InvalidPaymentError, apply_payment, mark_fully_paid

logger = logging.getLogger(__name__)

router = APIRouter()


def _credit_order_or_400(db: Session, order_id: int, seller: Seller) -> Order:
    order = get_order_or_404(db, order_id, seller)
    if order.payment_type != PaymentType.CREDIT:
        raise HTTPException(status_code=400, detail="Only credit orders take payments.")
    return order


def _replayed(db: Session, order: Order, operation_id: str, seller: Seller):
    """Result of an earlier request with the same operation_id, if any."""
    if not operation_id:
        return None
    existing = crud_orders.get_payment_by_operation(db, operation_id, seller.id)
    if existing is None:
        return None
    if existing.order_id != order.id:
        raise HTTPException(status_code=409, detail="operation_id was already used for another order.")
    logger.info("Payment %s replayed for order %s (operation %s)", existing.id, order.id, operation_id)
    return PaymentResult(
        order=order_read(order),
        payment=PaymentRead.model_validate(existing),
        replayed=True,
    )


# -----------------------------
# 1. Open credit orders, earliest due first
# -----------------------------
@router.get("/", response_model=List[OrderRead])
def list_credit_orders(
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    orders = (
        crud_orders.order_query(db, seller.id)
        .filter(
            Order.payment_type == PaymentType.CREDIT,
            Order.status == OrderStatus.PENDING,
        )
        # Undated credit goes last
        .order_by(Order.due_date.is_(None), asc(Order.due_date), asc(Order.id))
        .all()
    )
    return [order_read(o) for o in orders]


# -----------------------------
# 2. Partial (or full) payment
# -----------------------------
@router.post("/{order_id}/payments", response_model=PaymentResult)
def add_payment(
    order_id: int,
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """
    Appends a Payment row and raises paid_amount in the same commit.
    Amounts above the remaining balance go through with a warning.
    """
    order = _credit_order_or_400(db, order_id, seller)

    replay = _replayed(db, order, payment_in.operation_id, seller)
    if replay is not None:
        return replay

    try:
        update = apply_payment(order, payment_in.amount, payment_in.channel)
    except InvalidPaymentError as e:
        logger.warning("Payment rejected for order %s: %s", order_id, e)
        raise HTTPException(status_code=400, detail=str(e))

    if update.warning:
        logger.warning("Overpayment on order %s: %s", order_id, update.warning)

    payment = crud_orders.record_ledger_update(
        db, order, update, seller.id, operation_id=payment_in.operation_id,
    )
    logger.info(
        "Payment %s of %s recorded on order %s (status %s)",
        payment.id, update.payment_amount, order_id, update.new_status.value,
    )

    return PaymentResult(
        order=order_read(get_order_or_404(db, order_id, seller)),
        payment=PaymentRead.model_validate(payment),
        overpayment=update.overpayment,
        warning=update.warning,
    )


# -----------------------------
# 3. Mark as fully paid
# -----------------------------
@router.post("/{order_id}/mark-paid", response_model=PaymentResult)
def mark_paid(
    order_id: int,
    paid_in: Optional[MarkPaidRequest] = None,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    paid_in = paid_in or MarkPaidRequest()
    order = _credit_order_or_400(db, order_id, seller)

    replay = _replayed(db, order, paid_in.operation_id, seller)
    if replay is not None:
        return replay

    update = mark_fully_paid(order, paid_in.channel)
    payment = crud_orders.record_ledger_update(
        db, order, update, seller.id,
        operation_id=paid_in.operation_id,
        log_payment=paid_in.record_payment,
    )
    logger.info("Order %s marked as fully paid by seller %s", order_id, seller.id)

    return PaymentResult(
        order=order_read(get_order_or_404(db, order_id, seller)),
        payment=PaymentRead.model_validate(payment) if payment else None,
    )

# dimerr/routers/notifications.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import asc
from sqlalchemy.orm import Session, joinedload

from dimerr.database import get_db
from dimerr.models import Order, OrderStatus, PaymentType
from dimerr.schemas.reports import UpcomingDue, UpcomingDuesResponse
from dimerr.security import get_current_seller, Seller
from dimerr.utils.ledger import compute_due_status, compute_remaining, seller_today
from dimerr.utils.notifications import Reminder, build_reminder, soonest_due

router = APIRouter()


def _due_orders(db: Session, seller: Seller, today, include_overdue: bool, limit: int):
    query = (
        db.query(Order)
        .options(joinedload(Order.customer))
        .filter(
            Order.seller_id == seller.id,
            Order.payment_type == PaymentType.CREDIT,
            Order.status == OrderStatus.PENDING,
            Order.due_date.isnot(None),
        )
    )
    if not include_overdue:
        query = query.filter(Order.due_date >= today)
    return query.order_by(asc(Order.due_date), asc(Order.id)).limit(limit).all()


@router.get("/", response_model=UpcomingDuesResponse)
def upcoming_dues(
    include_overdue: bool = False,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """Open credit due today or later (past-due too with include_overdue)."""
    today = seller_today()
    orders = _due_orders(db, seller, today, include_overdue, limit)

    items = [
        UpcomingDue(
            order_id=o.id,
            customer_name=o.customer.name if o.customer else "Customer",
            due_date=o.due_date,
            total_srp=o.total_srp,
            paid_amount=o.paid_amount,
            remaining=compute_remaining(o),
            due_status=compute_due_status(o.due_date, today).model_dump(),
        )
        for o in orders
    ]
    return UpcomingDuesResponse(today=today, total=len(items), items=items)


@router.get("/next", response_model=Reminder)
def next_reminder(
    include_overdue: bool = False,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """Title and body of the browser notification for the soonest due credit."""
    orders = _due_orders(db, seller, seller_today(), include_overdue, limit=10)
    order = soonest_due(orders)
    if order is None:
        raise HTTPException(status_code=404, detail="No upcoming credit due dates")
    return build_reminder(order)

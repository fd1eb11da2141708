# dimerr/routers/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy import desc, or_
from sqlalchemy.orm import Session
from typing import List

from dimerr.database import get_db
from dimerr.models import Order, OrderStatus
from dimerr.schemas.orders import OrderRead
from dimerr.security import get_current_seller, Seller
from dimerr.crud import orders as crud_orders
from dimerr.routers.orders import order_read

router = APIRouter()


@router.get("/", response_model=List[OrderRead])
def payment_history(
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """Orders that received money, newest first, each with its payment log."""
    orders = (
        crud_orders.order_query(db, seller.id)
        .filter(or_(Order.paid_amount > 0, Order.status == OrderStatus.PAID))
        .order_by(desc(Order.order_date), desc(Order.id))
        .all()
    )
    return [order_read(o) for o in orders]

# dimerr/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from dimerr.database import get_db
from dimerr.models import Order
from dimerr.security import get_current_seller, Seller
from dimerr.utils.dashboard import DashboardSummary, summarize_orders

router = APIRouter()


@router.get("/", response_model=DashboardSummary)
def get_dashboard(
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """Totals, open credit and per-brand sales over every order of the seller."""
    orders = (
        db.query(Order)
        .options(joinedload(Order.brand))
        .filter(Order.seller_id == seller.id)
        .all()
    )
    return summarize_orders(orders)

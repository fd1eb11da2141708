# dimerr/routers/orders.py
import logging
import os
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import desc
from sqlalchemy.orm import Session
from typing import List, Optional

from dimerr.database import get_db
from dimerr.models import Brand, Campaign, Customer, Order, OrderStatus, PaymentType, Product
from dimerr.schemas.orders import (
    OrderCreate, OrderItemRead, OrderPreview, OrderRead, OrderStatusSchema,
    PaymentRead, PaymentTypeSchema, PricedLine,
)
from dimerr.security import get_current_seller, Seller
from dimerr.crud import orders as crud_orders
from dimerr.utils.invoice import build_invoice, format_quantity
from dimerr.utils.ledger import compute_due_status, compute_remaining, status_label
from dimerr.utils.pdf_generator import generate_invoice_pdf
from dimerr.utils.totals import OrderValidationError, compute_totals

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates"))
templates.env.filters["quantity"] = format_quantity


# -----------------------------
# Helpers
# -----------------------------
def order_read(order: Order, include_payments: bool = True) -> OrderRead:
    """ORM Order -> OrderRead with the derived ledger fields filled in."""
    due = compute_due_status(order.due_date) if order.due_date else None

    items = [
        OrderItemRead(
            id=it.id,
            product_id=it.product_id,
            product_label=it.product.label if it.product else "Unknown product",
            quantity=it.quantity,
            srp_each=it.srp_each,
            cost_each=it.cost_each,
            line_total_srp=it.line_total_srp,
            line_total_cost=it.line_total_cost,
        )
        for it in order.items
    ]

    return OrderRead(
        id=order.id,
        customer_id=order.customer_id,
        customer_name=order.customer.name if order.customer else None,
        brand_id=order.brand_id,
        brand_name=order.brand.name if order.brand else None,
        campaign_id=order.campaign_id,
        campaign_name=order.campaign.name if order.campaign else None,
        order_date=order.order_date,
        payment_type=order.payment_type.value,
        status=order.status.value,
        status_label=status_label(order),
        due_date=order.due_date,
        due_status=due.model_dump() if due else None,
        total_srp=order.total_srp,
        total_cost=order.total_cost,
        profit=order.profit if order.profit is not None else order.total_srp - order.total_cost,
        paid_amount=order.paid_amount,
        remaining=compute_remaining(order),
        created_at=order.created_at,
        items=items,
        payments=[PaymentRead.model_validate(p) for p in order.payments] if include_payments else [],
    )


def get_order_or_404(db: Session, order_id: int, seller: Seller) -> Order:
    order = crud_orders.get_order(db, order_id, seller.id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _owned(db: Session, model, obj_id: int, seller: Seller, label: str):
    obj = db.query(model).filter(model.id == obj_id, model.seller_id == seller.id).first()
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def _validated_lines(db: Session, order_in: OrderCreate, seller: Seller):
    """Checks the whole submission before anything is written."""
    brand = _owned(db, Brand, order_in.brand_id, seller, "Brand") if order_in.brand_id else None

    try:
        lines = crud_orders.checked_lines(order_in, brand)
    except OrderValidationError as e:
        logger.warning("Order rejected for seller %s: %s", seller.id, e)
        raise HTTPException(status_code=400, detail=str(e))

    _owned(db, Customer, order_in.customer_id, seller, "Customer")

    if order_in.campaign_id is not None:
        campaign = _owned(db, Campaign, order_in.campaign_id, seller, "Campaign")
        if campaign.brand_id != brand.id:
            raise HTTPException(status_code=400, detail="Campaign does not belong to the selected brand.")

    product_ids = {line.product_id for line in lines}
    found = db.query(Product.id).filter(
        Product.id.in_(list(product_ids)),
        Product.seller_id == seller.id,
    ).all()
    missing = product_ids - {row.id for row in found}
    if missing:
        raise HTTPException(status_code=404, detail=f"Product not found: {sorted(missing)}")

    return lines


# -----------------------------
# 1. Recent orders
# -----------------------------
@router.get("/", response_model=List[OrderRead])
def list_orders(
    status_filter: Optional[OrderStatusSchema] = Query(None, alias="status"),
    payment_type: Optional[PaymentTypeSchema] = None,
    limit: int = 20,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    query = crud_orders.order_query(db, seller.id)
    if status_filter is not None:
        query = query.filter(Order.status == OrderStatus(status_filter.value))
    if payment_type is not None:
        query = query.filter(Order.payment_type == PaymentType(payment_type.value))

    orders = query.order_by(desc(Order.order_date), desc(Order.id)).limit(limit).all()
    return [order_read(o) for o in orders]


# -----------------------------
# 2. Price the form without saving
# -----------------------------
@router.post("/preview", response_model=OrderPreview)
def preview_order(
    order_in: OrderCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    brand = _owned(db, Brand, order_in.brand_id, seller, "Brand") if order_in.brand_id else None
    lines = crud_orders.price_lines(order_in, brand)
    totals = compute_totals(lines)

    return OrderPreview(
        items=[
            PricedLine(
                product_id=line.product_id,
                quantity=line.quantity,
                srp_each=line.srp_each,
                cost_each=line.cost_each,
                line_total_srp=line.line_total_srp,
                line_total_cost=line.line_total_cost,
            )
            for line in lines
        ],
        total_srp=totals.total_srp,
        total_cost=totals.total_cost,
        profit=totals.profit,
    )


# -----------------------------
# 3. Create
# -----------------------------
@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: OrderCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """
    Saves the order and its lines in one transaction. Cash orders are born
    paid in full; credit orders start pending with nothing paid.
    """
    lines = _validated_lines(db, order_in, seller)
    order = crud_orders.create_order(db, order_in, lines, seller.id)
    logger.info(
        "Order %s created by seller %s (%s, total %s)",
        order.id, seller.id, order.payment_type.value, order.total_srp,
    )
    return order_read(get_order_or_404(db, order.id, seller))


# -----------------------------
# 4. Detail
# -----------------------------
@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return order_read(get_order_or_404(db, order_id, seller))


# -----------------------------
# 5. Edit (items are replaced, not diffed)
# -----------------------------
@router.put("/{order_id}", response_model=OrderRead)
def update_order(
    order_id: int,
    order_in: OrderCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    order = get_order_or_404(db, order_id, seller)
    lines = _validated_lines(db, order_in, seller)

    crud_orders.update_order(db, order, order_in, lines, seller.id)
    logger.info("Order %s updated by seller %s", order_id, seller.id)
    return order_read(get_order_or_404(db, order_id, seller))


# -----------------------------
# 6. Delete (items and payments go with it)
# -----------------------------
@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    order = get_order_or_404(db, order_id, seller)
    db.delete(order)
    db.commit()
    logger.info("Order %s deleted by seller %s", order_id, seller.id)


# -----------------------------
# 7. Payment history of one order
# -----------------------------
@router.get("/{order_id}/payments", response_model=List[PaymentRead])
def get_order_payments(
    order_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return get_order_or_404(db, order_id, seller).payments


# -----------------------------
# 8. Invoice (printable HTML / PDF)
# -----------------------------
@router.get("/{order_id}/invoice", response_class=HTMLResponse)
def get_invoice_html(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    order = get_order_or_404(db, order_id, seller)
    return templates.TemplateResponse(
        request,
        "invoice.html",
        {"invoice": build_invoice(order)},
    )


@router.get("/{order_id}/invoice.pdf")
def get_invoice_pdf(
    order_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    order = get_order_or_404(db, order_id, seller)
    pdf_content = generate_invoice_pdf(order)

    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=INV-{order.id}.pdf"},
    )

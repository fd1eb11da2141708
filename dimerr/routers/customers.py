# dimerr/routers/customers.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from dimerr.database import get_db
from dimerr.models import Customer
from dimerr.schemas.customers import CustomerCreate, CustomerRead, CustomerUpdate
from dimerr.security import get_current_seller, Seller

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_customer_or_404(db: Session, customer_id: int, seller: Seller) -> Customer:
    customer = db.query(Customer).filter(
        Customer.id == customer_id,
        Customer.seller_id == seller.id,
    ).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


# --------------------------------------------------------------------------
# 1. LIST CUSTOMERS
# --------------------------------------------------------------------------
@router.get("/", response_model=List[CustomerRead])
def get_customers(
    skip: int = 0,
    limit: int = 500,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    query = db.query(Customer).filter(Customer.seller_id == seller.id)

    if search:
        search_fmt = f"%{search.strip()}%"
        query = query.filter(
            (Customer.name.ilike(search_fmt)) |
            (Customer.phone.ilike(search_fmt))
        )

    return query.order_by(Customer.name).offset(skip).limit(limit).all()


# --------------------------------------------------------------------------
# 2. DETAIL
# --------------------------------------------------------------------------
@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return _get_customer_or_404(db, customer_id, seller)


# --------------------------------------------------------------------------
# 3. CREATE
# --------------------------------------------------------------------------
@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_in: CustomerCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    new_customer = Customer(
        seller_id=seller.id,
        name=customer_in.name,
        phone=customer_in.phone or None,
        notes=customer_in.notes or None,
    )

    db.add(new_customer)
    db.commit()
    db.refresh(new_customer)
    logger.info("Customer %s created by seller %s", new_customer.id, seller.id)
    return new_customer


# --------------------------------------------------------------------------
# 4. UPDATE
# --------------------------------------------------------------------------
@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: int,
    customer_in: CustomerUpdate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    customer = _get_customer_or_404(db, customer_id, seller)

    update_data = customer_in.dict(exclude_unset=True)
    for field, value in update_data.items():
        if field == "name" and value is None:
            continue
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


# --------------------------------------------------------------------------
# 5. DELETE (rejected by the database while orders reference the customer)
# --------------------------------------------------------------------------
@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    customer = _get_customer_or_404(db, customer_id, seller)
    db.delete(customer)
    db.commit()
    logger.info("Customer %s deleted by seller %s", customer_id, seller.id)

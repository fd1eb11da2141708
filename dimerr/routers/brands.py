# dimerr/routers/brands.py
import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List

from dimerr.database import get_db
from dimerr.models import Brand
from dimerr.schemas.products import BrandCreate, BrandRead, BrandUpdate, DerivedCost
from dimerr.security import get_current_seller, Seller
from dimerr.utils.totals import cost_from_margin

logger = logging.getLogger(__name__)

router = APIRouter()


def get_brand_or_404(db: Session, brand_id: int, seller: Seller) -> Brand:
    brand = db.query(Brand).filter(
        Brand.id == brand_id,
        Brand.seller_id == seller.id,
    ).first()
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


@router.get("/", response_model=List[BrandRead])
def get_brands(
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return db.query(Brand).filter(Brand.seller_id == seller.id).order_by(Brand.name).all()


@router.get("/{brand_id}", response_model=BrandRead)
def get_brand(
    brand_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return get_brand_or_404(db, brand_id, seller)


@router.get("/{brand_id}/cost", response_model=DerivedCost)
def derive_cost(
    brand_id: int,
    srp: Decimal = Query(..., ge=0),
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """Cost per unit the order form fills in when the SRP changes."""
    brand = get_brand_or_404(db, brand_id, seller)
    return DerivedCost(
        brand_id=brand.id,
        srp=srp,
        default_margin_percent=brand.default_margin_percent,
        cost_each=cost_from_margin(srp, brand.default_margin_percent),
    )


@router.post("/", response_model=BrandRead, status_code=status.HTTP_201_CREATED)
def create_brand(
    brand_in: BrandCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    brand = Brand(
        seller_id=seller.id,
        name=brand_in.name,
        default_margin_percent=brand_in.default_margin_percent,
    )
    db.add(brand)
    db.commit()
    db.refresh(brand)
    logger.info("Brand %s created by seller %s", brand.id, seller.id)
    return brand


@router.put("/{brand_id}", response_model=BrandRead)
def update_brand(
    brand_id: int,
    brand_in: BrandUpdate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    brand = get_brand_or_404(db, brand_id, seller)

    update_data = brand_in.dict(exclude_unset=True)
    for field, value in update_data.items():
        if field == "name" and value is None:
            continue
        setattr(brand, field, value)

    db.commit()
    db.refresh(brand)
    return brand


@router.delete("/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_brand(
    brand_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    # Products, campaigns and orders keep a foreign key to the brand;
    # the database refuses the delete while any of them exist.
    brand = get_brand_or_404(db, brand_id, seller)
    db.delete(brand)
    db.commit()
    logger.info("Brand %s deleted by seller %s", brand_id, seller.id)

# dimerr/routers/products.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional

from dimerr.database import get_db
from dimerr.models import Product
from dimerr.routers.brands import get_brand_or_404
from dimerr.schemas.products import ProductCreate, ProductRead, ProductUpdate
from dimerr.security import get_current_seller, Seller

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_product_or_404(db: Session, product_id: int, seller: Seller) -> Product:
    product = db.query(Product).filter(
        Product.id == product_id,
        Product.seller_id == seller.id,
    ).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# -----------------------------
# 1. List products
# -----------------------------
@router.get("/", response_model=List[ProductRead])
def read_products(
    skip: int = 0,
    limit: int = 500,
    search: str = "",
    brand_id: Optional[int] = None,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    query = db.query(Product).filter(Product.seller_id == seller.id)

    if brand_id is not None:
        query = query.filter(Product.brand_id == brand_id)

    if search:
        term = f"%{search.strip()}%"
        query = query.filter(or_(
            Product.name.ilike(term),
            Product.type.ilike(term),
            Product.variant_name.ilike(term),
            Product.category.ilike(term),
        ))

    return query.order_by(Product.name).offset(skip).limit(limit).all()


# -----------------------------
# 2. Detail
# -----------------------------
@router.get("/{product_id}", response_model=ProductRead)
def read_product(
    product_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return _get_product_or_404(db, product_id, seller)


# -----------------------------
# 3. Create
# -----------------------------
@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    product_in: ProductCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    if product_in.brand_id is not None:
        get_brand_or_404(db, product_in.brand_id, seller)

    product = Product(
        seller_id=seller.id,
        brand_id=product_in.brand_id,
        name=product_in.name,
        category=product_in.category or None,
        type=product_in.type or None,
        variant_name=product_in.variant_name or None,
        volume=product_in.volume or None,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created by seller %s", product.id, seller.id)
    return product


# -----------------------------
# 4. Update
# -----------------------------
@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    product_in: ProductUpdate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    product = _get_product_or_404(db, product_id, seller)

    update_data = product_in.dict(exclude_unset=True)
    if update_data.get("brand_id") is not None:
        get_brand_or_404(db, update_data["brand_id"], seller)

    for field, value in update_data.items():
        if field == "name" and value is None:
            continue
        setattr(product, field, value)

    db.commit()
    db.refresh(product)
    return product


# -----------------------------
# 5. Delete (blocked while order items reference it)
# -----------------------------
@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    product = _get_product_or_404(db, product_id, seller)
    db.delete(product)
    db.commit()
    logger.info("Product %s deleted by seller %s", product_id, seller.id)

# dimerr/routers/campaigns.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session
from typing import List, Optional

from dimerr.database import get_db
from dimerr.models import Campaign
from dimerr.routers.brands import get_brand_or_404
from dimerr.schemas.products import CampaignCreate, CampaignRead, CampaignUpdate
from dimerr.security import get_current_seller, Seller

logger = logging.getLogger(__name__)

router = APIRouter()


def get_campaign_or_404(db: Session, campaign_id: int, seller: Seller) -> Campaign:
    campaign = db.query(Campaign).filter(
        Campaign.id == campaign_id,
        Campaign.seller_id == seller.id,
    ).first()
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


@router.get("/", response_model=List[CampaignRead])
def get_campaigns(
    brand_id: Optional[int] = None,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    """Newest brochures first, optionally for one brand."""
    query = db.query(Campaign).filter(Campaign.seller_id == seller.id)
    if brand_id is not None:
        query = query.filter(Campaign.brand_id == brand_id)
    return query.order_by(desc(Campaign.created_at), desc(Campaign.id)).all()


@router.get("/{campaign_id}", response_model=CampaignRead)
def get_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    return get_campaign_or_404(db, campaign_id, seller)


@router.post("/", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
def create_campaign(
    campaign_in: CampaignCreate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    get_brand_or_404(db, campaign_in.brand_id, seller)

    if campaign_in.start_date and campaign_in.end_date and campaign_in.end_date < campaign_in.start_date:
        raise HTTPException(status_code=400, detail="End date cannot be before the start date.")

    campaign = Campaign(
        seller_id=seller.id,
        brand_id=campaign_in.brand_id,
        name=campaign_in.name,
        start_date=campaign_in.start_date,
        end_date=campaign_in.end_date,
    )
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    logger.info("Campaign %s created for brand %s", campaign.id, campaign.brand_id)
    return campaign


@router.put("/{campaign_id}", response_model=CampaignRead)
def update_campaign(
    campaign_id: int,
    campaign_in: CampaignUpdate,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    campaign = get_campaign_or_404(db, campaign_id, seller)

    update_data = campaign_in.dict(exclude_unset=True)
    for field, value in update_data.items():
        if field == "name" and value is None:
            continue
        setattr(campaign, field, value)

    if campaign.start_date and campaign.end_date and campaign.end_date < campaign.start_date:
        raise HTTPException(status_code=400, detail="End date cannot be before the start date.")

    db.commit()
    db.refresh(campaign)
    return campaign


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    seller: Seller = Depends(get_current_seller),
):
    campaign = get_campaign_or_404(db, campaign_id, seller)
    db.delete(campaign)
    db.commit()
    logger.info("Campaign %s deleted by seller %s", campaign_id, seller.id)

from typing import Optional
from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from datetime import date, datetime

from dimerr.schemas.customers import _required_name


# --- Brands ---
class BrandBase(BaseModel):
    name: str
    default_margin_percent: Optional[Decimal] = Field(default=None, ge=0, lt=100)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _required_name(value)


class BrandCreate(BrandBase):
    pass


class BrandUpdate(BrandBase):
    name: Optional[str] = None


class BrandRead(BrandBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DerivedCost(BaseModel):
    brand_id: int
    srp: Decimal
    default_margin_percent: Optional[Decimal] = None
    cost_each: Optional[Decimal] = None


# --- Campaigns (brochures) ---
class CampaignBase(BaseModel):
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _required_name(value)


class CampaignCreate(CampaignBase):
    brand_id: int


class CampaignUpdate(CampaignBase):
    name: Optional[str] = None


class CampaignRead(CampaignBase):
    id: int
    brand_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- Products ---
class ProductBase(BaseModel):
    name: str
    brand_id: Optional[int] = None
    category: Optional[str] = None
    type: Optional[str] = None
    variant_name: Optional[str] = None
    volume: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _required_name(value)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    name: Optional[str] = None


class ProductRead(ProductBase):
    id: int
    label: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

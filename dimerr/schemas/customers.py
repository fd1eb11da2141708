from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


def _required_name(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


# --- BASE ---
class CustomerBase(BaseModel):
    name: str
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _required_name(value)


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    name: Optional[str] = None


class CustomerRead(CustomerBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

from pydantic import BaseModel
from typing import List
from decimal import Decimal
from datetime import date

from dimerr.schemas.orders import DueStatusRead


class UpcomingDue(BaseModel):
    order_id: int
    customer_name: str
    due_date: date
    total_srp: Decimal
    paid_amount: Decimal
    remaining: Decimal
    due_status: DueStatusRead


class UpcomingDuesResponse(BaseModel):
    today: date
    total: int
    items: List[UpcomingDue]

# dimerr/models/customers.py
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from dimerr.database import Base


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)
    name = Column(String, index=True, nullable=False)

    phone = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

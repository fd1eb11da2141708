# dimerr/models/products.py
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Date, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dimerr.database import Base


class Brand(Base):
    __tablename__ = "brands"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)
    name = Column(String, index=True, nullable=False)

    # Percent of SRP kept as profit; drives cost_each auto-fill
    default_margin_percent = Column(Numeric(5, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


# --- Brochure / sales period of a brand ---
class Campaign(Base):
    __tablename__ = "campaigns"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False)
    name = Column(String, nullable=False)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    brand = relationship("Brand")


class Product(Base):
    __tablename__ = "products"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, index=True, nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=True)

    name = Column(String, index=True, nullable=False)
    category = Column(String, nullable=True)
    type = Column(String, nullable=True)          # e.g. Cologne, Lotion
    variant_name = Column(String, nullable=True)  # e.g. scent or shade
    volume = Column(String, nullable=True)        # e.g. 50ml

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    brand = relationship("Brand")

    @property
    def label(self) -> str:
        extras = [x for x in (self.type, self.variant_name, self.volume) if x]
        if not extras:
            return self.name
        return f"{self.name} — {' • '.join(extras)}"

import os

# Keep the application engine off the developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dimerr.database import get_db
from dimerr.main import app
from dimerr.models import Base
from dimerr.security import Seller, get_current_seller

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SELLER = Seller(id="seller-1", email="seller1@example.com")
OTHER_SELLER = Seller(id="seller-2", email="seller2@example.com")


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _client_for(seller, db):
    def override_get_db():
        try:
            yield db
        finally:
            # A failed commit leaves the shared session needing a rollback
            db.rollback()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_seller] = lambda: seller
    return TestClient(app)


@pytest.fixture()
def client(db):
    yield _client_for(SELLER, db)
    app.dependency_overrides.clear()


@pytest.fixture()
def as_seller(db):
    """Switch the authenticated seller mid-test: as_seller(OTHER_SELLER)."""
    def switch(seller):
        return _client_for(seller, db)

    yield switch
    app.dependency_overrides.clear()


@pytest.fixture()
def catalog(client):
    """One customer, a 30% margin brand with a campaign, and two products."""
    customer = client.post("/api/customers/", json={"name": "Aling Nena", "phone": "0917"}).json()
    brand = client.post("/api/brands/", json={"name": "Avon", "default_margin_percent": 30}).json()
    campaign = client.post(
        "/api/campaigns/",
        json={"name": "Brochure C10", "brand_id": brand["id"]},
    ).json()
    cologne = client.post(
        "/api/products/",
        json={"name": "Far Away", "brand_id": brand["id"], "type": "Cologne", "volume": "50ml"},
    ).json()
    lipstick = client.post(
        "/api/products/",
        json={"name": "Simply Pretty", "brand_id": brand["id"]},
    ).json()
    return {
        "customer": customer,
        "brand": brand,
        "campaign": campaign,
        "cologne": cologne,
        "lipstick": lipstick,
    }


@pytest.fixture()
def order_payload(catalog):
    def build(payment_type="cash", items=None, **extra):
        payload = {
            "customer_id": catalog["customer"]["id"],
            "brand_id": catalog["brand"]["id"],
            "order_date": "2024-05-01",
            "payment_type": payment_type,
            "items": items if items is not None else [
                {"product_id": catalog["cologne"]["id"], "quantity": 1, "srp_each": "150"},
            ],
        }
        payload.update(extra)
        return payload

    return build

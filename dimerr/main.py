import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError

from dimerr.config import CORS_ORIGINS, LOG_LEVEL
from dimerr.database import engine
from dimerr.models import Base
from dimerr.routers import (
    customers, brands, campaigns, products,
    orders, credit, payments, dashboard, notifications,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

# 1. CREATE TABLES
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Dimerr",
    description="Seller tools. simplified: customers, orders, credit and payments",
    version="1.0.0",
)

# 2. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. ROUTERS (API)
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(brands.router, prefix="/api/brands", tags=["Brands"])
app.include_router(campaigns.router, prefix="/api/campaigns", tags=["Campaigns"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(credit.router, prefix="/api/credit", tags=["Credit (Utang)"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])


@app.get("/health")
def health():
    return {"status": "ok", "utc": datetime.now(timezone.utc).isoformat()}


# --- 4. ERROR HANDLING ---
@app.exception_handler(404)
async def not_found_exception_handler(request: Request, exc):
    detail = getattr(exc, "detail", None) or "Resource not found"
    return JSONResponse(status_code=404, content={"detail": detail})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # The database's own constraint text goes back verbatim
    message = str(exc.orig) if exc.orig is not None else str(exc)
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=409, content={"detail": message})

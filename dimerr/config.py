# dimerr/config.py
import os

# Point this at PostgreSQL in production
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dimerr.db")

# Tokens are issued by the external auth provider (shared secret)
SECRET_KEY = os.getenv("SECRET_KEY", "dimerr_secret_key_change_me_in_prod")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE") or None
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 12))  # 12 hours

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

# "Today" for due dates is the seller's calendar day, not the server's
SELLER_TIMEZONE = os.getenv("SELLER_TIMEZONE", "Asia/Manila")
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₱")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from dimerr.config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_AUDIENCE, SECRET_KEY

# Sign-in, sign-up and password recovery live with the external auth
# provider; this service only verifies the access tokens it issues.
bearer_scheme = HTTPBearer(auto_error=False)


class Seller(BaseModel):
    id: str
    email: Optional[str] = None


def decode_access_token(token: str) -> Seller:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    options = {"verify_aud": JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            options=options,
        )
    except JWTError:
        raise credentials_exception

    seller_id = payload.get("sub")
    if not seller_id:
        raise credentials_exception
    return Seller(id=str(seller_id), email=payload.get("email"))


def create_access_token(
    seller_id: str,
    email: Optional[str] = None,
    extra: Optional[dict] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Token in the provider's shape. Used by seed scripts and tests."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": seller_id, "exp": expire}
    if email:
        to_encode["email"] = email
    if JWT_AUDIENCE:
        to_encode["aud"] = JWT_AUDIENCE
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


async def get_current_seller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Seller:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_access_token(credentials.credentials)

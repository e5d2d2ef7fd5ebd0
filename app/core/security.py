import logging
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from app.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    JWT_SECRET_KEY,
)

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")

TOKEN_EXPIRED = "EXPIRED"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    claims = {
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + expires_delta,
        **data,
    }
    return jwt.encode(claims, JWT_SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str):
    """Return the token payload, ``TOKEN_EXPIRED`` or None when invalid."""
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
        if not payload.get("sub"):
            logger.warning("Token missing 'sub' claim")
            return None
        return payload
    except ExpiredSignatureError as e:
        logger.warning(f"Token expired: {str(e)}")
        return TOKEN_EXPIRED
    except JWTError as e:
        logger.warning(f"JWT validation failed: {type(e).__name__} - {str(e)}")
        return None


def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    """
    Dependency guarding protected routes.
    Returns the verified token payload; ``sub`` holds the user id.
    """
    payload = verify_access_token(token)
    if payload == TOKEN_EXPIRED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from tsbapp.infrastructure.db.session import SessionLocal
from tsbapp.infrastructure.security.jwt_service import ADMIN_SUBJECT, decode_access_token

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"

# auto_error=False so the session cookie can be used instead of a header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def admin_required(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    token = token or request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        logger.warning(f"Unauthenticated request to {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(token)
    except ValueError as e:
        logger.warning(f"Token validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if payload.get("sub") != ADMIN_SUBJECT:
        logger.warning(f"Access denied for token subject {payload.get('sub')!r}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrative privileges required",
        )
    return payload

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from tsbapp import config

logger = logging.getLogger(__name__)

ADMIN_SUBJECT = "admin"


def verify_admin_password(password: str, expected: Optional[str] = None) -> bool:
    expected = config.ADMIN_PASSWORD if expected is None else expected
    if not password:
        return False
    return hmac.compare_digest(password.encode(), expected.encode())


def create_access_token(subject: str = ADMIN_SUBJECT, expires_delta: Optional[timedelta] = None) -> str:
    expires = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": subject, "exp": expires}
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Payload of a valid token. Raises ValueError if the token is bad or expired."""
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}") from e

# carwash/tokens.py
import secrets
from datetime import datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from .config import RATING_LINK_TTL_HOURS, RATING_TOKEN_ALGORITHM, RATING_TOKEN_SECRET
from .errors import ExpiredLinkError, InvalidLinkError
from .utils import utcnow


def new_token_id() -> str:
    return secrets.token_urlsafe(24)


def link_expiry(now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) + timedelta(hours=RATING_LINK_TTL_HOURS)


def create_rating_token(service_id: int, token_id: str, expires_at: datetime) -> str:
    to_encode = {"sub": str(service_id), "jti": token_id, "exp": expires_at, "purpose": "rating"}
    return jwt.encode(to_encode, RATING_TOKEN_SECRET, algorithm=RATING_TOKEN_ALGORITHM)


def decode_rating_token(token: str) -> dict:
    """Return the claims of a rating token.

    Raises ExpiredLinkError when the signature is fine but `exp` passed,
    InvalidLinkError for anything else.
    """
    try:
        payload = jwt.decode(token, RATING_TOKEN_SECRET, algorithms=[RATING_TOKEN_ALGORITHM])
    except ExpiredSignatureError:
        raise ExpiredLinkError("Rating link has expired")
    except JWTError:
        raise InvalidLinkError()
    if payload.get("purpose") != "rating" or not payload.get("jti") or not payload.get("sub"):
        raise InvalidLinkError()
    try:
        payload["service_id"] = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidLinkError()
    return payload

import re
from datetime import datetime, timezone
from typing import Optional


def norm_plate(s: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", (s or "").upper().strip())


def utcnow() -> datetime:
    # sqlite naive datetime saklar; her yerde naive UTC kullanıyoruz
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)

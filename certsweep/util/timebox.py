from __future__ import annotations
from datetime import datetime, timezone

OPENSSL_DATE_FORMAT = "%b %d %H:%M:%S %Y"

def parse_openssl_date(value: str) -> datetime:
    """
    Parse an OpenSSL validity date such as "Jan  5 09:30:00 2025 GMT".
    Raises ValueError on anything else.
    """
    parts = value.split()
    if parts and parts[-1] in ("GMT", "UTC"):
        parts = parts[:-1]
    dt = datetime.strptime(" ".join(parts), OPENSSL_DATE_FORMAT)
    return dt.replace(tzinfo=timezone.utc)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def days_left(not_after: datetime | None, now: datetime | None = None) -> int | None:
    if not_after is None:
        return None
    now = now or utcnow()
    return int((not_after - now).total_seconds() // 86400)

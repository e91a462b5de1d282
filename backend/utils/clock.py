from datetime import datetime, timezone
from typing import Optional

def utc_now() -> datetime:
    """Naive UTC timestamp; DuckDB TIMESTAMP columns carry no zone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware values are converted to UTC and stripped; naive values are taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

"""Which statuses are actionable, and when a cached status must be refreshed."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

CACHE_TIMEOUT = timedelta(days=14)

INDEXABLE_STATUSES = frozenset(
    {
        "Discovered - currently not indexed",
        "Crawled - currently not indexed",
        "URL is unknown to Google",
        "Forbidden",
        "Error",
    }
)

# Labels recording a failed lookup rather than a coverage state.
TRANSIENT_STATUSES = frozenset({"RateLimited"})


def is_indexable(status: str) -> bool:
    return status in INDEXABLE_STATUSES


def should_recheck(
    status: str,
    last_checked_at: datetime,
    now: Optional[datetime] = None,
    timeout: timedelta = CACHE_TIMEOUT,
) -> bool:
    """Return ``True`` when a cached status has to be fetched again.

    Indexable and transient statuses are always re-confirmed; anything else
    is trusted until it is older than *timeout*.
    """
    if is_indexable(status) or status in TRANSIENT_STATUSES:
        return True
    now = now or datetime.now(timezone.utc)
    if last_checked_at.tzinfo is None:
        last_checked_at = last_checked_at.replace(tzinfo=timezone.utc)
    return last_checked_at < now - timeout

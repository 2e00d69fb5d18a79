"""Tests for the staleness policy and the indexable status set."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from indexer.engine.policy import (
    CACHE_TIMEOUT,
    INDEXABLE_STATUSES,
    TRANSIENT_STATUSES,
    is_indexable,
    should_recheck,
)

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestIndexableStatuses:
    def test_fixed_membership(self) -> None:
        assert INDEXABLE_STATUSES == {
            "Discovered - currently not indexed",
            "Crawled - currently not indexed",
            "URL is unknown to Google",
            "Forbidden",
            "Error",
        }

    def test_indexed_is_not_indexable(self) -> None:
        assert is_indexable("Submitted and indexed") is False

    def test_rate_limited_is_not_indexable(self) -> None:
        assert is_indexable("RateLimited") is False

    def test_rate_limited_is_transient(self) -> None:
        assert "RateLimited" in TRANSIENT_STATUSES
        assert not TRANSIENT_STATUSES & INDEXABLE_STATUSES


class TestShouldRecheck:
    @pytest.mark.parametrize("status", sorted(INDEXABLE_STATUSES))
    def test_indexable_status_always_rechecked(self, status: str) -> None:
        checked = NOW - timedelta(minutes=1)
        assert should_recheck(status, checked, now=NOW) is True

    def test_rate_limited_checked_a_minute_ago(self) -> None:
        assert should_recheck("RateLimited", NOW - timedelta(minutes=1), now=NOW) is True

    def test_forbidden_checked_a_minute_ago(self) -> None:
        assert should_recheck("Forbidden", NOW - timedelta(minutes=1), now=NOW) is True

    def test_recent_indexed_status_is_trusted(self) -> None:
        assert should_recheck("Submitted and indexed", NOW - timedelta(days=1), now=NOW) is False

    def test_old_indexed_status_is_rechecked(self) -> None:
        assert should_recheck("Submitted and indexed", NOW - timedelta(days=15), now=NOW) is True

    def test_boundary_is_not_stale(self) -> None:
        """Exactly at the horizon the record is still valid (strictly older is stale)."""
        assert should_recheck("Page with redirect", NOW - CACHE_TIMEOUT, now=NOW) is False

    def test_naive_timestamp_treated_as_utc(self) -> None:
        naive = (NOW - timedelta(days=20)).replace(tzinfo=None)
        assert should_recheck("Submitted and indexed", naive, now=NOW) is True

    def test_custom_timeout(self) -> None:
        checked = NOW - timedelta(days=2)
        assert should_recheck("Submitted and indexed", checked, now=NOW, timeout=timedelta(days=1)) is True

    def test_defaults_to_current_time(self) -> None:
        recent = datetime.now(timezone.utc) - timedelta(hours=1)
        assert should_recheck("Submitted and indexed", recent) is False

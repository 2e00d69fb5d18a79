"""Batched status fetch over a site's sitemap URLs.

URLs are processed in consecutive chunks of ``batch_size``.  Inside a chunk
every lookup runs concurrently (``asyncio.gather``); the next chunk starts
only once the previous one has fully resolved, which caps the number of
in-flight inspection calls and keeps progress reporting deterministic.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from indexer.cache.models import StatusRecord, utc_now
from indexer.cache.store import StatusCache
from indexer.engine.policy import CACHE_TIMEOUT, should_recheck

T = TypeVar("T")
R = TypeVar("R")

StatusIndex = Dict[str, List[str]]
StatusLookup = Callable[[str], Awaitable[str]]
BatchCallback = Callable[[int, int], None]


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """Split *items* into consecutive slices of at most *size* elements."""
    if size < 1:
        raise ValueError(f"batch size must be at least 1, got {size}")
    return [items[i:i + size] for i in range(0, len(items), size)]


async def iter_batches(
    task: Callable[[T], Awaitable[R]],
    items: Sequence[T],
    batch_size: int,
) -> AsyncIterator[Tuple[int, int, Sequence[T], List[R]]]:
    """Yield ``(chunk_index, chunk_count, chunk, results)`` one chunk at a time.

    The next chunk is not started until the consumer asks for it.
    """
    chunks = chunked(items, batch_size)
    for index, chunk in enumerate(chunks):
        results = await asyncio.gather(*(task(item) for item in chunk))
        yield index, len(chunks), chunk, list(results)


async def batch(
    task: Callable[[T], Awaitable[R]],
    items: Sequence[T],
    batch_size: int,
    on_batch_complete: Optional[BatchCallback] = None,
) -> List[R]:
    """Run *task* over *items*, one concurrent chunk at a time.

    Results come back in input order.  The first exception raised by any
    task propagates and no further chunks are started.
    """
    results: List[R] = []
    async for index, count, _chunk, chunk_results in iter_batches(task, items, batch_size):
        results.extend(chunk_results)
        if on_batch_complete is not None:
            on_batch_complete(index, count)
    return results


async def fetch_statuses(
    urls: Sequence[str],
    cache: StatusCache,
    lookup: StatusLookup,
    batch_size: int = 50,
    on_batch_complete: Optional[BatchCallback] = None,
    clock: Callable = utc_now,
    timeout: timedelta = CACHE_TIMEOUT,
) -> StatusIndex:
    """Make sure every URL in *urls* has a current status in *cache*.

    Args:
        urls: Page URLs in discovery order.  Repeated URLs are looked up and
            indexed once, at their first position.
        cache: Status cache, updated in place.
        lookup: Async callable returning the remote status label of a URL.
        batch_size: Maximum number of concurrent lookups.
        on_batch_complete: Called with ``(chunk_index, chunk_count)`` after
            each chunk has been added to the index.
        clock: Returns the timestamp stored on refreshed records.
        timeout: Cache horizon for non-indexable statuses.

    Returns:
        Status label → URLs with that status, in discovery order.

    Raises:
        Whatever *lookup* raises; the remaining chunks are abandoned.
    """
    index: StatusIndex = {}
    unique_urls = list(dict.fromkeys(urls))

    async def resolve(url: str) -> StatusRecord:
        record = cache.get(url)
        if record is None or should_recheck(
            record.status, record.last_checked_at, now=clock(), timeout=timeout
        ):
            status = await lookup(url)
            record = StatusRecord(status=status, last_checked_at=clock())
            cache[url] = record
        return record

    async for chunk_index, count, chunk, records in iter_batches(resolve, unique_urls, batch_size):
        for url, record in zip(chunk, records):
            index.setdefault(record.status, []).append(url)
        if on_batch_complete is not None:
            on_batch_complete(chunk_index, count)

    return index

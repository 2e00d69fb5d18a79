"""Sequential indexing-request pass over the indexable URLs.

Each URL is fully resolved (metadata lookup, optional publish call, outcome)
before the next one starts.  A failure on one URL is tallied and the pass
moves on; nothing in here aborts the loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

import httpx

from indexer.errors import IndexerError


class IndexingClient(Protocol):
    async def get_publish_metadata(self, url: str) -> int: ...

    async def request_indexing(self, url: str) -> int: ...


class RemediationOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    ALREADY_REQUESTED = "already_requested"
    FAILED = "failed"


@dataclass
class RemediationTally:
    succeeded: int = 0
    already_requested: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.already_requested + self.failed

    def record(self, outcome: RemediationOutcome) -> None:
        if outcome is RemediationOutcome.SUCCEEDED:
            self.succeeded += 1
        elif outcome is RemediationOutcome.ALREADY_REQUESTED:
            self.already_requested += 1
        else:
            self.failed += 1


async def remediate_url(client: IndexingClient, url: str) -> RemediationOutcome:
    """Request indexing for *url* if it has never been submitted."""
    status = await client.get_publish_metadata(url)
    if status == 404:
        indexing_status = await client.request_indexing(url)
        if indexing_status == 200:
            print("[INDEXING] 🚀 Indexing requested successfully. It may take a few days for Google to process it.")
            return RemediationOutcome.SUCCEEDED
        return RemediationOutcome.FAILED
    if status < 400:
        print("[INDEXING] 🕛 Indexing already requested previously. It may take a few days for Google to process it.")
        return RemediationOutcome.ALREADY_REQUESTED
    # 403 and every other failure class end up here.
    return RemediationOutcome.FAILED


async def remediate(
    urls: Sequence[str],
    client: IndexingClient,
    on_outcome: Optional[Callable[[str, RemediationOutcome], None]] = None,
) -> RemediationTally:
    """Walk *urls* in order and tally one outcome per URL."""
    tally = RemediationTally()
    for url in urls:
        print(f"[INDEXING] 📄 Processing url: {url}")
        try:
            outcome = await remediate_url(client, url)
        except (IndexerError, httpx.HTTPError) as exc:
            print(f"[INDEXING] ✗ {url}: {exc}")
            outcome = RemediationOutcome.FAILED
        tally.record(outcome)
        if on_outcome is not None:
            on_outcome(url, outcome)
    return tally

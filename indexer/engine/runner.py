"""High-level runner for one site.

``run_site`` wires together auth, sitemap discovery, the status cache, the
batched status fetch, the classifier and the remediation pass.  Progress is
printed to stdout by the stages themselves; the caller receives a
:class:`RunReport` once everything has finished.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, List, Optional

import httpx

from indexer.cache.store import cache_path_for, load_cache, prune_cache, save_cache
from indexer.config import Settings, settings as default_settings
from indexer.engine.classifier import classify
from indexer.engine.fetcher import StatusIndex, fetch_statuses
from indexer.engine.remediation import RemediationTally, remediate
from indexer.errors import NoSitemapsError
from indexer.gsc.api import SearchConsoleClient, convert_to_site_url
from indexer.gsc.auth import get_access_token
from indexer.gsc.sitemap import get_sitemap_pages, list_available_sites
from indexer.gsc.transport import build_client


@dataclass
class RunReport:
    site_url: str
    sitemaps: List[str] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    status_index: StatusIndex = field(default_factory=dict)
    indexable: List[str] = field(default_factory=list)
    tally: RemediationTally = field(default_factory=RemediationTally)
    pruned: int = 0


def _print_batch_progress(index: int, count: int) -> None:
    print(f"[BATCH] 📦 Batch {index + 1} of {count} complete")


async def run_site(
    site_input: str,
    *,
    cfg: Optional[Settings] = None,
    prune: bool = False,
    client: Optional[httpx.AsyncClient] = None,
    token_provider: Callable[[Settings], str] = get_access_token,
    on_audit_complete: Optional[Callable[[RunReport], None]] = None,
) -> RunReport:
    """Audit *site_input* and request indexing for its unindexed pages.

    Args:
        site_input: Domain (``example.com``) or URL-prefix property
            (``https://example.com/``).
        cfg: Settings override.  Defaults to the module-level ``settings``.
        prune: Drop cached statuses for URLs no longer in the sitemaps.
        client: Shared HTTP client.  When ``None`` one is created for the
            run and closed on exit.
        token_provider: Blocking callable returning a bearer token; run in
            a worker thread.
        on_audit_complete: Called with the partial report after the status
            pass and classification, before any indexing request is sent.

    Returns:
        The finished :class:`RunReport`.

    Raises:
        NoSitemapsError: The property has no registered sitemaps.  No cache
            file is read or written in that case.
        IndexerError: Auth, access, transport or cache failures abort the run
            before the cache is saved.
    """
    cfg = cfg or default_settings
    site_url = convert_to_site_url(site_input)
    print(f"[SITE] 🔎 Processing site: {site_url}")

    access_token = await asyncio.to_thread(token_provider, cfg)

    owns_client = client is None
    http = client or build_client(cfg)
    try:
        sitemaps, pages = await get_sitemap_pages(http, access_token, site_url, cfg)
        if not sitemaps:
            print("[SITE] 📋 No sitemaps found, checking available sites for this service account …")
            available = await list_available_sites(http, access_token, cfg)
            raise NoSitemapsError(site_url, available)

        print(f"[SITE] 👉 Found {len(pages)} URLs in {len(sitemaps)} sitemap(s)")
        report = RunReport(site_url=site_url, sitemaps=sitemaps, pages=pages)

        # ------------------------------------------------------------------
        # Status pass: the cache is only written once every batch succeeded
        # ------------------------------------------------------------------
        cache_path = cache_path_for(site_url, cfg.cache_dir)
        cache = load_cache(cache_path)
        gsc = SearchConsoleClient(http, access_token, site_url, cfg)

        report.status_index = await fetch_statuses(
            pages,
            cache,
            gsc.inspect_url,
            batch_size=cfg.batch_size,
            on_batch_complete=_print_batch_progress,
            timeout=timedelta(days=cfg.cache_timeout_days),
        )
        if prune:
            report.pruned = prune_cache(cache, pages)
            print(f"[CACHE] Pruned {report.pruned} cached URL(s) no longer in the sitemaps.")
        save_cache(cache_path, cache)
        print(f"[CACHE] Saved {len(cache)} status record(s) to {cache_path}")

        report.indexable = classify(report.status_index)
        if on_audit_complete is not None:
            on_audit_complete(report)

        # ------------------------------------------------------------------
        # Remediation pass
        # ------------------------------------------------------------------
        report.tally = await remediate(report.indexable, gsc)
        return report
    finally:
        if owns_client:
            await http.aclose()

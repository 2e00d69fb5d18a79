"""Sitemap discovery: registered sitemaps → unique page URLs.

Search Console tells us which sitemaps a property has; each sitemap is then
fetched and expanded.  ``<sitemapindex>`` documents are followed recursively
and gzipped sitemaps are inflated before parsing.
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import quote
from xml.etree import ElementTree as ET

import httpx

from indexer.config import Settings
from indexer.errors import TransportError
from indexer.gsc.api import auth_headers
from indexer.gsc.failures import classify_failure, to_exception
from indexer.gsc.transport import fetch_with_retry, retry_options

SITES_URL = "https://www.googleapis.com/webmasters/v3/sites"

# Nested sitemap indexes deeper than this are ignored.
_MAX_DEPTH = 5


@dataclass
class SiteEntry:
    """One property the service account can see in Search Console."""

    site_url: str
    permission_level: str


# ---------------------------------------------------------------------------
# Search Console listings
# ---------------------------------------------------------------------------

async def list_available_sites(
    client: httpx.AsyncClient,
    access_token: str,
    cfg: Optional[Settings] = None,
) -> List[SiteEntry]:
    """Return every property visible to the service account.

    Raises:
        RemoteAccessError: The listing was refused (API disabled, no access).
    """
    response = await fetch_with_retry(
        client, "GET", SITES_URL, headers=auth_headers(access_token), **retry_options(cfg)
    )
    if response.status_code >= 300:
        failure = classify_failure(response.status_code, response.text)
        raise to_exception(failure, "list available sites")

    return [
        SiteEntry(
            site_url=entry.get("siteUrl", ""),
            permission_level=entry.get("permissionLevel", "unknown"),
        )
        for entry in response.json().get("siteEntry", [])
    ]


async def list_sitemaps(
    client: httpx.AsyncClient,
    access_token: str,
    site_url: str,
    cfg: Optional[Settings] = None,
) -> List[str]:
    """Return the sitemap URLs registered for *site_url*.

    Raises:
        RemoteAccessError: The Search Console API refused the listing.
    """
    url = f"{SITES_URL}/{quote(site_url, safe='')}/sitemaps"
    response = await fetch_with_retry(
        client, "GET", url, headers=auth_headers(access_token), **retry_options(cfg)
    )
    if response.status_code >= 300:
        failure = classify_failure(response.status_code, response.text)
        raise to_exception(failure, f"list sitemaps for {site_url}")

    return [entry["path"] for entry in response.json().get("sitemap", []) if entry.get("path")]


# ---------------------------------------------------------------------------
# Sitemap XML expansion
# ---------------------------------------------------------------------------

def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_sitemap(content: bytes) -> Tuple[List[str], List[str]]:
    """Parse a sitemap document.

    Returns:
        ``(page_urls, child_sitemap_urls)``.  Exactly one of the two is
        non-empty for a well-formed ``<urlset>`` / ``<sitemapindex>``.

    Raises:
        xml.etree.ElementTree.ParseError: *content* is not XML.
    """
    if content[:2] == b"\x1f\x8b":
        content = gzip.decompress(content)
    root = ET.fromstring(content)
    locs = [
        (el.text or "").strip()
        for el in root.iter()
        if _local_name(el.tag) == "loc" and (el.text or "").strip()
    ]
    if _local_name(root.tag) == "sitemapindex":
        return [], locs
    return locs, []


async def _expand_sitemap(
    client: httpx.AsyncClient,
    url: str,
    depth: int,
    cfg: Optional[Settings] = None,
) -> List[str]:
    if depth > _MAX_DEPTH:
        print(f"[SITEMAP] Skipping {url}: nested deeper than {_MAX_DEPTH} levels.")
        return []

    try:
        response = await fetch_with_retry(client, "GET", url, **retry_options(cfg))
    except TransportError as exc:
        print(f"[SITEMAP] Skipping {url}: unreachable ({exc})")
        return []
    if response.status_code >= 300:
        print(f"[SITEMAP] Skipping {url}: HTTP {response.status_code}")
        return []
    try:
        pages, children = parse_sitemap(response.content)
    except (ET.ParseError, OSError, EOFError) as exc:
        print(f"[SITEMAP] Skipping {url}: not a valid sitemap ({exc})")
        return []

    for child in children:
        pages.extend(await _expand_sitemap(client, child, depth + 1, cfg))
    return pages


async def get_sitemap_pages(
    client: httpx.AsyncClient,
    access_token: str,
    site_url: str,
    cfg: Optional[Settings] = None,
) -> Tuple[List[str], List[str]]:
    """Return ``(sitemaps, unique_page_urls)`` for *site_url*.

    Page order follows sitemap order; duplicates keep their first position.
    """
    sitemaps = await list_sitemaps(client, access_token, site_url, cfg)

    seen: set[str] = set()
    pages: List[str] = []
    for sitemap_url in sitemaps:
        for page in await _expand_sitemap(client, sitemap_url, 0, cfg):
            if page not in seen:
                seen.add(page)
                pages.append(page)
        print(f"[SITEMAP] {sitemap_url}: {len(pages)} unique URL(s) so far.")

    return sitemaps, pages

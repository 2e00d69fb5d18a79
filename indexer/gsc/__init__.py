"""Google Search Console edge — transport, auth, sitemaps and the indexing API."""

from indexer.gsc.api import SearchConsoleClient, convert_to_site_url
from indexer.gsc.auth import get_access_token
from indexer.gsc.sitemap import SiteEntry, get_sitemap_pages, list_available_sites
from indexer.gsc.transport import build_client, fetch_with_retry

__all__ = [
    "SearchConsoleClient",
    "convert_to_site_url",
    "get_access_token",
    "SiteEntry",
    "get_sitemap_pages",
    "list_available_sites",
    "build_client",
    "fetch_with_retry",
]

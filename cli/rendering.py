"""Utilities for rendering run results in the CLI."""

from __future__ import annotations

from typing import List

from indexer.engine.remediation import RemediationTally
from indexer.engine.runner import RunReport
from indexer.errors import NoSitemapsError


def status_emoji(status: str) -> str:
    icons = {
        "Submitted and indexed": "✅",
        "Duplicate without user-selected canonical": "😵",
        "Crawled - currently not indexed": "👀",
        "Discovered - currently not indexed": "👀",
        "Page with redirect": "🔀",
        "URL is unknown to Google": "❓",
        "RateLimited": "🚦",
    }
    return icons.get(status, "❌")


def render_status_summary(report: RunReport) -> str:
    """Status breakdown plus the list of URLs that will be submitted."""
    lines: List[str] = [
        "",
        f"👍 Done, here's the status of all {len(report.pages)} pages:",
    ]
    for status, urls in report.status_index.items():
        lines.append(f"• {status_emoji(status)} {status}: {len(urls)} pages")
    lines.append("")

    if not report.indexable:
        lines.append("✨ There are no pages that can be indexed. Everything is already indexed!")
    else:
        lines.append(f"✨ Found {len(report.indexable)} pages that can be indexed.")
        lines.extend(f"• {url}" for url in report.indexable)
    lines.append("")
    return "\n".join(lines)


def render_tally(tally: RemediationTally) -> str:
    return "\n".join(
        [
            "",
            "📊 Summary:",
            f"   ✅ Successfully requested indexing: {tally.succeeded} URLs",
            f"   ⏳ Already requested previously: {tally.already_requested} URLs",
            f"   ❌ Failed: {tally.failed} URLs",
            "",
        ]
    )


def render_no_sitemaps(error: NoSitemapsError) -> str:
    """Diagnostic shown when the property has no sitemaps registered."""
    lines = ["❌ No sitemaps found, add them to Google Search Console and try again.", ""]
    if not error.available_sites:
        lines.append(
            "❌ No sites found. Make sure the service account has been added as Owner "
            "in Google Search Console."
        )
        return "\n".join(lines)

    lines.append("✅ Sites accessible by this service account:")
    for site in error.available_sites:
        lines.append(f"   • {site.site_url} (permission: {site.permission_level})")
    lines.append("")
    lines.append("💡 Make sure you're using the exact site URL format from the list above.")
    lines.append(f"   You tried: {error.site_url}")
    if not any(site.site_url == error.site_url for site in error.available_sites):
        lines.append("   ⚠️  This site URL is not in the list above.")
    return "\n".join(lines)

"""Thin client for the Search Console URL Inspection and Indexing APIs.

``SearchConsoleClient`` binds one ``httpx.AsyncClient`` and one access token
to a site so the engine can call ``inspect_url`` / ``get_publish_metadata`` /
``request_indexing`` with nothing but a page URL.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from indexer.config import Settings
from indexer.gsc.failures import (
    PermissionDenied,
    RateLimited,
    ServiceDisabled,
    classify_failure,
)
from indexer.gsc.transport import fetch_with_retry, retry_options

INSPECT_URL = "https://searchconsole.googleapis.com/v1/urlInspection/index:inspect"
METADATA_URL = "https://indexing.googleapis.com/v3/urlNotifications/metadata"
PUBLISH_URL = "https://indexing.googleapis.com/v3/urlNotifications:publish"


class IndexStatusResult(BaseModel):
    coverageState: Optional[str] = None


class InspectionResult(BaseModel):
    indexStatusResult: Optional[IndexStatusResult] = None


class InspectionResponse(BaseModel):
    inspectionResult: Optional[InspectionResult] = None


def parse_coverage_state(text: str) -> Optional[str]:
    """Return the ``coverageState`` of an inspection response body, if any."""
    try:
        body = InspectionResponse.model_validate_json(text)
    except ValidationError:
        return None
    if body.inspectionResult is None or body.inspectionResult.indexStatusResult is None:
        return None
    return body.inspectionResult.indexStatusResult.coverageState


def convert_to_site_url(value: str) -> str:
    """Normalise CLI input into a Search Console property identifier.

    URL-prefix properties keep their scheme and always end with ``/``; a bare
    domain becomes a domain property (``sc-domain:example.com``).
    """
    value = value.strip()
    if value.startswith("http://") or value.startswith("https://"):
        return value if value.endswith("/") else value + "/"
    if value.startswith("sc-domain:"):
        return value
    return f"sc-domain:{value}"


def auth_headers(access_token: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {access_token}",
    }


class SearchConsoleClient:
    """Per-site wrapper around the inspection and indexing endpoints."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        access_token: str,
        site_url: str,
        cfg: Optional[Settings] = None,
    ) -> None:
        self._client = client
        self._headers = auth_headers(access_token)
        self._retry = retry_options(cfg)
        self.site_url = site_url

    async def inspect_url(self, url: str) -> str:
        """Return the coverage state label Google reports for *url*.

        HTTP-level failures are folded into labels so they flow through the
        status index like any other status: ``"Forbidden"`` for 403,
        ``"RateLimited"`` for 429 and ``"Error"`` for everything else, including
        a success body without a readable coverage state.
        """
        response = await fetch_with_retry(
            self._client,
            "POST",
            INSPECT_URL,
            headers=self._headers,
            json={"inspectionUrl": url, "siteUrl": self.site_url},
            **self._retry,
        )
        if response.status_code == 403:
            print(f"[INSPECT] 🔐 This service account doesn't have access to this site ({url}).")
            return "Forbidden"
        if response.status_code == 429:
            return "RateLimited"
        if response.status_code >= 300:
            print(f"[INSPECT] Failed to get status for {url}: HTTP {response.status_code}")
            return "Error"

        state = parse_coverage_state(response.text)
        if not state:
            print(f"[INSPECT] No coverage state in the response for {url}.")
            return "Error"
        return state

    async def get_publish_metadata(self, url: str) -> int:
        """Return the HTTP status of the Indexing API metadata lookup.

        ``404`` means the URL was never submitted; anything below ``400``
        means a notification is already on record.  Other 4xx responses
        are reported before the code is returned.
        """
        response = await fetch_with_retry(
            self._client,
            "GET",
            METADATA_URL,
            headers=self._headers,
            params={"url": url},
            **self._retry,
        )
        if response.status_code >= 400 and response.status_code != 404:
            self._report_failure(response, "read indexing metadata")
        return response.status_code

    async def request_indexing(self, url: str) -> int:
        """Submit a ``URL_UPDATED`` notification for *url*; ``200`` means accepted."""
        response = await fetch_with_retry(
            self._client,
            "POST",
            PUBLISH_URL,
            headers=self._headers,
            json={"url": url, "type": "URL_UPDATED"},
            **self._retry,
        )
        if response.status_code >= 300:
            self._report_failure(response, "request indexing")
        return response.status_code

    def _report_failure(self, response: httpx.Response, action: str) -> None:
        failure = classify_failure(response.status_code, response.text)
        if isinstance(failure, ServiceDisabled):
            print(f"[INDEXING] ❌ {failure.service_title} is not enabled in your Google Cloud project.")
            if failure.activation_url:
                print(f"[INDEXING]    Enable it here: {failure.activation_url}")
        elif isinstance(failure, PermissionDenied):
            print(f"[INDEXING] 🔐 Permission denied trying to {action}: {failure.message}")
        elif isinstance(failure, RateLimited):
            print("[INDEXING] 🚦 Rate limited. Try again later.")
        else:
            print(f"[INDEXING] ❌ Failed to {action}: HTTP {failure.status_code}")

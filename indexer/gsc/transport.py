"""Retrying HTTP transport shared by every Google API call.

Network failures and 5xx responses are retried with exponential backoff.
Everything else (including 4xx) is returned to the caller untouched so the
API layer can interpret the status code itself.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Optional

import httpx

from indexer.config import Settings, settings
from indexer.errors import TransportError


def build_client(cfg: Optional[Settings] = None) -> httpx.AsyncClient:
    """Return the shared async client used for a whole run."""
    cfg = cfg or settings
    return httpx.AsyncClient(
        timeout=cfg.request_timeout,
        follow_redirects=True,
    )


def retry_options(cfg: Optional[Settings] = None) -> dict[str, Any]:
    """Keyword arguments binding :func:`fetch_with_retry` to *cfg*."""
    cfg = cfg or settings
    return {"retries": cfg.retry_max, "base_delay": cfg.retry_base_delay}


def _backoff_delay(base_delay: float, attempt: int) -> float:
    return base_delay * (2 ** attempt) + random.uniform(0, 1) * base_delay


async def fetch_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    retries: int | None = None,
    base_delay: float | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Issue *method* *url* on *client*, retrying transient failures.

    Args:
        client: Open ``httpx.AsyncClient``.
        method: HTTP verb.
        url: Target URL.
        retries: Extra attempts after the first one.  Defaults to
            ``settings.retry_max``.
        base_delay: First backoff delay in seconds.  Defaults to
            ``settings.retry_base_delay``.
        **kwargs: Forwarded to :meth:`httpx.AsyncClient.request`.

    Returns:
        The first response with a status code below 500.

    Raises:
        TransportError: Every attempt failed at the network level or with a
            5xx status.
    """
    max_retries = settings.retry_max if retries is None else retries
    delay_base = settings.retry_base_delay if base_delay is None else base_delay
    reason = ""

    for attempt in range(max_retries + 1):
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            reason = f"{type(exc).__name__}: {exc}"
        else:
            if response.status_code < 500:
                return response
            reason = f"HTTP {response.status_code}: {response.text[:200]}"

        if attempt < max_retries:
            delay = _backoff_delay(delay_base, attempt)
            print(
                f"[RETRY] {method} {url} failed ({reason}); "
                f"attempt {attempt + 1}/{max_retries}, retrying in {delay:.1f}s …"
            )
            await asyncio.sleep(delay)

    raise TransportError(url, max_retries + 1, reason)

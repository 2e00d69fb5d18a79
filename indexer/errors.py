"""Exception hierarchy shared by every layer of the indexer.

The CLI catches :class:`IndexerError` subclasses and turns each into its own
operator-facing message; anything else is a bug and is left to propagate.
"""

from __future__ import annotations

from typing import Any


class IndexerError(Exception):
    """Base class for every error the indexer raises on purpose."""


class TransportError(IndexerError):
    """An HTTP call kept failing after all retries were used up."""

    def __init__(self, url: str, attempts: int, reason: str) -> None:
        super().__init__(f"{url} failed after {attempts} attempt(s): {reason}")
        self.url = url
        self.attempts = attempts
        self.reason = reason


class RemoteAccessError(IndexerError):
    """The remote API refused the call for a configuration or permission reason."""

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.hint = hint


class ServiceDisabledError(RemoteAccessError):
    """The Google Cloud project behind the service account has the API switched off."""

    def __init__(self, service_title: str, activation_url: str | None = None) -> None:
        hint = "After enabling, wait a few minutes for the changes to propagate."
        if activation_url:
            hint = f"Enable it here: {activation_url}\n{hint}"
        super().__init__(f"{service_title} is not enabled in your Google Cloud project.", hint)
        self.service_title = service_title
        self.activation_url = activation_url


class PermissionDeniedError(RemoteAccessError):
    """The service account is not allowed to read the requested property."""


class CacheCorruptError(IndexerError):
    """A persisted status cache exists but cannot be parsed."""

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"Status cache {path} is unreadable: {reason}")
        self.path = path
        self.reason = reason


class AuthError(IndexerError):
    """No usable service-account credentials were found."""


class NoSitemapsError(IndexerError):
    """The property has no sitemaps registered in Search Console."""

    def __init__(self, site_url: str, available_sites: list[Any]) -> None:
        super().__init__(f"No sitemaps found for {site_url}")
        self.site_url = site_url
        self.available_sites = available_sites

"""Typed classification of Google API error responses.

Google wraps failures in an envelope like::

    {"error": {"code": 403, "message": "...", "status": "PERMISSION_DENIED",
               "details": [{"reason": "SERVICE_DISABLED",
                            "metadata": {"serviceTitle": "...", "activationUrl": "..."}}]}}

``classify_failure`` decodes that envelope once and returns one of a small
set of failure variants.  A body that does not decode becomes
:class:`UnclassifiedFailure`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ValidationError

from indexer.errors import PermissionDeniedError, RemoteAccessError, ServiceDisabledError


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    reason: str | None = None
    metadata: dict[str, Any] = {}


class ErrorBody(BaseModel):
    code: int | None = None
    message: str = ""
    status: str | None = None
    details: list[ErrorDetail] = []


class ErrorEnvelope(BaseModel):
    error: ErrorBody


# ---------------------------------------------------------------------------
# Failure variants
# ---------------------------------------------------------------------------

@dataclass
class ServiceDisabled:
    status_code: int
    service_title: str
    activation_url: str | None


@dataclass
class PermissionDenied:
    status_code: int
    message: str


@dataclass
class RateLimited:
    status_code: int
    message: str


@dataclass
class UnclassifiedFailure:
    status_code: int
    text: str


RemoteFailure = Union[ServiceDisabled, PermissionDenied, RateLimited, UnclassifiedFailure]


def classify_failure(status_code: int, text: str) -> RemoteFailure:
    """Turn a failed response into a :data:`RemoteFailure` variant."""
    try:
        envelope = ErrorEnvelope.model_validate_json(text)
    except ValidationError:
        if status_code == 429:
            return RateLimited(status_code, text)
        return UnclassifiedFailure(status_code, text)

    for detail in envelope.error.details:
        if detail.reason == "SERVICE_DISABLED":
            return ServiceDisabled(
                status_code,
                detail.metadata.get("serviceTitle") or "API",
                detail.metadata.get("activationUrl"),
            )

    if status_code == 429:
        return RateLimited(status_code, envelope.error.message)
    if status_code == 403:
        return PermissionDenied(status_code, envelope.error.message or text)
    return UnclassifiedFailure(status_code, envelope.error.message or text)


def to_exception(failure: RemoteFailure, action: str) -> RemoteAccessError:
    """Build the exception raised when *action* fails with *failure*."""
    if isinstance(failure, ServiceDisabled):
        return ServiceDisabledError(failure.service_title, failure.activation_url)
    if isinstance(failure, PermissionDenied):
        return PermissionDeniedError(
            f"This service account doesn't have access to {action}.",
            hint=(
                "Add the service account as an Owner of the property in Search Console.\n"
                f"Error details: {failure.message}"
            ),
        )
    if isinstance(failure, RateLimited):
        return RemoteAccessError(
            f"Rate limited while trying to {action}.",
            hint="Quota exhausted; try again later.",
        )
    return RemoteAccessError(
        f"Failed to {action} (HTTP {failure.status_code}).",
        hint=failure.text[:500],
    )

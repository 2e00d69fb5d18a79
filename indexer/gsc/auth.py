"""Service-account authentication for the Search Console and Indexing APIs."""

from __future__ import annotations

from pathlib import Path

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from indexer.config import Settings, settings as default_settings
from indexer.errors import AuthError

SCOPES = [
    "https://www.googleapis.com/auth/webmasters.readonly",
    "https://www.googleapis.com/auth/indexing",
]

_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _load_credentials(cfg: Settings) -> service_account.Credentials:
    """Build credentials from explicit key material, else from the key file."""
    if cfg.client_email and cfg.private_key:
        info = {
            "type": "service_account",
            "client_email": cfg.client_email,
            # Keys pasted into env vars usually carry literal "\n" sequences.
            "private_key": cfg.private_key.replace("\\n", "\n"),
            "token_uri": _TOKEN_URI,
        }
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        except (ValueError, GoogleAuthError) as exc:
            raise AuthError(f"Invalid service account key for {cfg.client_email}: {exc}") from exc

    path = Path(cfg.service_account_path)
    if not path.exists():
        raise AuthError(
            f"No service account credentials found at {path}. "
            "Pass --path, or set GIS_CLIENT_EMAIL and GIS_PRIVATE_KEY."
        )
    try:
        return service_account.Credentials.from_service_account_file(str(path), scopes=SCOPES)
    except (ValueError, GoogleAuthError) as exc:
        raise AuthError(f"Invalid service account file {path}: {exc}") from exc


def get_access_token(cfg: Settings | None = None) -> str:
    """Return a fresh OAuth bearer token for the configured service account.

    Blocking (``google-auth`` refreshes through ``requests``); async callers
    should run it with ``asyncio.to_thread``.

    Raises:
        AuthError: Credentials are missing, malformed, or rejected.
    """
    cfg = cfg or default_settings
    credentials = _load_credentials(cfg)
    try:
        credentials.refresh(Request())
    except GoogleAuthError as exc:
        raise AuthError(f"Failed to obtain an access token: {exc}") from exc
    if not credentials.token:
        raise AuthError("Google returned an empty access token.")
    return credentials.token

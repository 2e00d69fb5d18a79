"""Per-site JSON status cache.

One document per Search Console property, stored under
``settings.cache_dir``::

    {
      "https://example.com/a": {"status": "Submitted and indexed",
                                "lastCheckedAt": "2024-05-01T10:00:00.000Z"}
    }

The file is read once before the status pass and written once after it.
Writes go through a temporary sibling file and ``os.replace`` so a crash
never leaves a half-written cache behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Iterable, Optional

from indexer.cache.models import StatusRecord
from indexer.config import settings
from indexer.errors import CacheCorruptError

StatusCache = Dict[str, StatusRecord]


def cache_path_for(site_url: str, cache_dir: Optional[Path] = None) -> Path:
    """Return the cache file used for *site_url*.

    ``https://example.com/`` → ``<cache_dir>/https_example.com_.json``.
    """
    name = (
        site_url.replace("http://", "http_")
        .replace("https://", "https_")
        .replace("/", "_")
    )
    return Path(cache_dir or settings.cache_dir) / f"{name}.json"


def load_cache(path: Path) -> StatusCache:
    """Load the cache at *path*.  Returns ``{}`` if the file does not exist.

    Raises:
        CacheCorruptError: The file exists but is not a valid cache document.
    """
    if not path.exists():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CacheCorruptError(path, str(exc)) from exc

    if not isinstance(raw, dict):
        raise CacheCorruptError(path, f"top-level value is {type(raw).__name__}, not an object")

    cache: StatusCache = {}
    for url, entry in raw.items():
        try:
            cache[url] = StatusRecord.from_dict(entry)
        except ValueError as exc:
            raise CacheCorruptError(path, f"entry for {url!r}: {exc}") from exc
    return cache


def save_cache(path: Path, cache: StatusCache) -> None:
    """Atomically replace the cache at *path* with *cache*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps({url: record.to_dict() for url, record in cache.items()}, indent=2)

    tmp = Path(f"{path}.tmp.{os.getpid()}")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)


def prune_cache(cache: StatusCache, urls: Iterable[str]) -> int:
    """Drop records for URLs not in *urls*.  Returns how many were removed."""
    keep = set(urls)
    stale = [url for url in cache if url not in keep]
    for url in stale:
        del cache[url]
    return len(stale)

"""Status cache package — per-site JSON persistence of indexing statuses."""

from indexer.cache.models import StatusRecord
from indexer.cache.store import StatusCache, cache_path_for, load_cache, prune_cache, save_cache

__all__ = ["StatusRecord", "StatusCache", "cache_path_for", "load_cache", "save_cache", "prune_cache"]

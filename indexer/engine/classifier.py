"""Pick the URLs worth submitting out of a status index."""

from __future__ import annotations

from typing import List, Mapping, Sequence

from indexer.engine.policy import is_indexable


def classify(index: Mapping[str, Sequence[str]]) -> List[str]:
    """Return the URLs whose status is indexable.

    Buckets are concatenated in the index's own order and each keeps its
    internal order.
    """
    indexable: List[str] = []
    for status, urls in index.items():
        if is_indexable(status):
            indexable.extend(urls)
    return indexable

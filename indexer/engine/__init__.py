"""Status-reconciliation engine.

Public API::

    from indexer.engine import run_site
    report = asyncio.run(run_site("example.com"))
"""

from indexer.engine.classifier import classify
from indexer.engine.fetcher import batch, fetch_statuses
from indexer.engine.policy import INDEXABLE_STATUSES, should_recheck
from indexer.engine.remediation import RemediationOutcome, RemediationTally, remediate
from indexer.engine.runner import RunReport, run_site

__all__ = [
    "classify",
    "batch",
    "fetch_statuses",
    "INDEXABLE_STATUSES",
    "should_recheck",
    "RemediationOutcome",
    "RemediationTally",
    "remediate",
    "RunReport",
    "run_site",
]

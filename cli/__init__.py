"""gsc-indexer command-line interface."""

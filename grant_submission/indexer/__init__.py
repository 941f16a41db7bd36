"""Indexer API client and confirmation poller."""

from .client import INDEXER_TIMEOUT, IndexerClient
from .poller import IndexerConfirmationPoller, PollOutcome, PollResult

__all__ = ["INDEXER_TIMEOUT", "IndexerClient", "IndexerConfirmationPoller", "PollOutcome", "PollResult"]

"""IndexerConfirmationPoller - wait until a broadcast attestation is visible to reads."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from .client import IndexerClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000
DEFAULT_INTERVAL_SECONDS = 1.5


class PollOutcome(str, Enum):
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PollResult:
    outcome: PollOutcome
    attempts: int

    @property
    def confirmed(self) -> bool:
        return self.outcome is PollOutcome.CONFIRMED


class IndexerConfirmationPoller:
    """Fixed-interval, bounded polling of the project's record set.

    Broadcast and indexing are not atomic, so after a transaction lands the
    new grant only shows up in reads once the indexer catches up. There is
    no backoff: every attempt is spaced ``interval_seconds`` apart.
    """

    def __init__(
        self,
        indexer: IndexerClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.indexer = indexer
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds
        self._sleep = sleep

    async def wait_for_record(
        self,
        record_uid: str,
        project_uid: str,
        network_id: int,
        tx_hash: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PollResult:
        """Poll until ``record_uid`` appears in ``project_uid``'s grants.

        Args:
            record_uid: UID of the submitted grant attestation.
            project_uid: Project the grant was attested under.
            network_id: Network of the transaction (for the indexing hint).
            tx_hash: Optional transaction hash sent to the indexer first.
            cancel_event: Set it to stop polling early (e.g. wizard teardown).

        Returns:
            PollResult. Exhausting the budget is an outcome, not an exception.
        """
        start = time.monotonic()
        if tx_hash:
            await self._notify(tx_hash, network_id)

        for attempt in range(1, self.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                return self._finish(PollOutcome.CANCELLED, attempt - 1, record_uid, start)

            if await self._record_visible(record_uid, project_uid, attempt):
                return self._finish(PollOutcome.CONFIRMED, attempt, record_uid, start)

            if attempt < self.max_attempts:
                if await self._pause(cancel_event):
                    return self._finish(PollOutcome.CANCELLED, attempt, record_uid, start)

        return self._finish(PollOutcome.TIMED_OUT, self.max_attempts, record_uid, start)

    async def _notify(self, tx_hash: str, network_id: int) -> None:
        # best effort; polling still finds the record on the indexer's own sweep
        try:
            await self.indexer.notify_transaction(tx_hash, network_id)
        except Exception as exc:
            logger.warning("index_hint_failed tx=%s network=%s error=%s", tx_hash, network_id, exc)

    async def _record_visible(self, record_uid: str, project_uid: str, attempt: int) -> bool:
        try:
            # one request per attempt; the poll interval is the only spacing
            records = await self.indexer.fetch_project_records(project_uid, retry=False)
        except Exception as exc:
            logger.debug("poll_attempt attempt=%d project=%s error=%s", attempt, project_uid, exc)
            return False
        return records.find_grant(record_uid) is not None

    async def _pause(self, cancel_event: Optional[asyncio.Event]) -> bool:
        """Wait one interval. Returns True if cancelled meanwhile."""
        if cancel_event is None:
            await self._sleep(self.interval_seconds)
            return False
        sleeper = asyncio.ensure_future(self._sleep(self.interval_seconds))
        waiter = asyncio.ensure_future(cancel_event.wait())
        done, pending = await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        return waiter in done

    def _finish(self, outcome: PollOutcome, attempts: int, record_uid: str, start: float) -> PollResult:
        duration = time.monotonic() - start
        log = logger.warning if outcome is PollOutcome.TIMED_OUT else logger.info
        log(
            "indexer_poll record=%s outcome=%s attempts=%d duration=%.2fs",
            record_uid, outcome.value, attempts, duration,
        )
        return PollResult(outcome=outcome, attempts=attempts)

"""AttestationSubmitter - sign, broadcast and confirm a grant attestation."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import IndexingTimeout, SignatureRejected, SubmissionFailure, SubmissionInProgress
from ..indexer import IndexerClient, IndexerConfirmationPoller, PollOutcome
from ..interfaces import AttestationClient, WalletClient
from ..models import (
    FlowType,
    SubmissionStatus,
    SubmissionStatusTracker,
    SubmitterContext,
    TransactionReceipt,
)
from ..models.submission_status import StatusListener
from ..reporting import ErrorReporter
from ..wizard import WizardController
from ..wizard.flows import get_flow
from .payload import GrantSubmissionPayload, build_payload

logger = logging.getLogger(__name__)

USER_CANCELLED_MESSAGE = "Transaction was cancelled. Your answers have been kept."


class SubmissionOutcome(str, Enum):
    INDEXED = "indexed"
    INDEXING_TIMEOUT = "indexing_timeout"
    INDEXING_CANCELLED = "indexing_cancelled"
    CANCELLED_BY_USER = "cancelled_by_user"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    outcome: SubmissionOutcome
    status: SubmissionStatus
    message: str
    attestation_uid: Optional[str] = None
    tx_hash: Optional[str] = None
    poll_attempts: int = 0
    tracks_assigned: Optional[bool] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is SubmissionOutcome.INDEXED

    def raise_for_outcome(self) -> None:
        """Raise the matching error for callers that prefer exceptions."""
        if self.outcome is SubmissionOutcome.INDEXING_TIMEOUT:
            raise IndexingTimeout(self.attestation_uid or "unknown", self.poll_attempts)
        if self.outcome is SubmissionOutcome.CANCELLED_BY_USER:
            raise SignatureRejected(self.message)
        if self.outcome is SubmissionOutcome.FAILED:
            raise SubmissionFailure(self.message) from self.error


class AttestationSubmitter:
    """Drives one submission through preparing -> ... -> indexed.

    At most one submission may be in flight per instance; a wizard owns one
    submitter for its lifetime.
    """

    def __init__(
        self,
        wallet: WalletClient,
        indexer: IndexerClient,
        poller: IndexerConfirmationPoller,
        error_reporter: ErrorReporter,
        status_listener: Optional[StatusListener] = None,
    ) -> None:
        self.wallet = wallet
        self.indexer = indexer
        self.poller = poller
        self.error_reporter = error_reporter
        self.status_listener = status_listener
        self.tracker: Optional[SubmissionStatusTracker] = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(
        self,
        controller: WizardController,
        attestation_client: AttestationClient,
        submitter: SubmitterContext,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SubmissionResult:
        """Build, sign, broadcast and confirm the wizard's current session.

        Args:
            controller: Wizard whose session is submitted; reset once indexed.
            attestation_client: Client bound to the verified network.
            submitter: Address and permissions of the caller.
            cancel_event: Stops confirmation polling early when set.

        Returns:
            SubmissionResult. Failures are reported and returned, not raised.

        Raises:
            SubmissionInProgress: another submission from this instance is running.
        """
        if self._in_flight:
            raise SubmissionInProgress("A submission is already in progress")
        self._in_flight = True
        try:
            return await self._run(controller, attestation_client, submitter, cancel_event)
        finally:
            self._in_flight = False

    async def _run(
        self,
        controller: WizardController,
        attestation_client: AttestationClient,
        submitter: SubmitterContext,
        cancel_event: Optional[asyncio.Event],
    ) -> SubmissionResult:
        tracker = SubmissionStatusTracker(self.status_listener)
        self.tracker = tracker
        session = controller.snapshot()
        flow_type = session.flow_type
        flow = get_flow(flow_type)
        context = {
            "flow_type": flow_type.value,
            "project_uid": submitter.project_uid,
            "address": submitter.address,
            "community_uid": session.form_data.community_uid,
            "network_id": session.form_data.network_id,
        }
        start = time.monotonic()

        try:
            tracker.advance_to(SubmissionStatus.PREPARING)
            payload = build_payload(session, submitter)
            attestation = attestation_client.build_grant(payload)

            tracker.advance_to(SubmissionStatus.AWAITING_SIGNATURE)
            receipt = await self._sign(attestation)
            tracker.advance_to(SubmissionStatus.SUBMITTING)
            self._check_receipt(receipt, payload)
        except SignatureRejected as exc:
            tracker.fail("user_cancelled")
            logger.info("submission_cancelled project=%s flow=%s", submitter.project_uid, flow_type.value)
            return SubmissionResult(
                outcome=SubmissionOutcome.CANCELLED_BY_USER,
                status=tracker.status,
                message=USER_CANCELLED_MESSAGE,
                error=exc,
            )
        except Exception as exc:
            tracker.fail(str(exc) or type(exc).__name__)
            self.error_reporter.report(
                f"Error creating {flow_type.value} to project {submitter.project_uid}", exc, context
            )
            return SubmissionResult(
                outcome=SubmissionOutcome.FAILED,
                status=tracker.status,
                message=flow.failure_message,
                error=exc,
            )

        tracker.advance_to(SubmissionStatus.INDEXING)
        logger.info(
            "submission_broadcast project=%s flow=%s uid=%s tx=%s",
            submitter.project_uid, flow_type.value, receipt.attestation_uid, receipt.primary_tx_hash,
        )
        poll = await self.poller.wait_for_record(
            record_uid=receipt.attestation_uid,
            project_uid=submitter.project_uid,
            network_id=receipt.network_id,
            tx_hash=receipt.primary_tx_hash,
            cancel_event=cancel_event,
        )

        if poll.outcome is not PollOutcome.CONFIRMED:
            outcome = (
                SubmissionOutcome.INDEXING_TIMEOUT
                if poll.outcome is PollOutcome.TIMED_OUT
                else SubmissionOutcome.INDEXING_CANCELLED
            )
            return SubmissionResult(
                outcome=outcome,
                status=tracker.status,
                message="Your transaction went through but is still being indexed.",
                attestation_uid=receipt.attestation_uid,
                tx_hash=receipt.primary_tx_hash,
                poll_attempts=poll.attempts,
            )

        tracker.advance_to(SubmissionStatus.INDEXED)
        controller.reset()
        tracks_assigned = await self._assign_tracks(payload, submitter, context)
        logger.info(
            "submission_indexed project=%s flow=%s uid=%s attempts=%d duration=%.2fs",
            submitter.project_uid, flow_type.value, receipt.attestation_uid,
            poll.attempts, time.monotonic() - start,
        )
        return SubmissionResult(
            outcome=SubmissionOutcome.INDEXED,
            status=tracker.status,
            message=flow.success_message,
            attestation_uid=receipt.attestation_uid,
            tx_hash=receipt.primary_tx_hash,
            poll_attempts=poll.attempts,
            tracks_assigned=tracks_assigned,
        )

    async def _sign(self, attestation) -> TransactionReceipt:
        receipt = await self.wallet.sign_and_submit(attestation)
        if receipt is None:
            raise SubmissionFailure("Wallet returned no transaction receipt")
        return receipt

    @staticmethod
    def _check_receipt(receipt: TransactionReceipt, payload: GrantSubmissionPayload) -> None:
        if receipt.network_id != payload.network_id:
            raise SubmissionFailure(
                f"Transaction landed on network {receipt.network_id}, expected {payload.network_id}"
            )

    async def _assign_tracks(
        self, payload: GrantSubmissionPayload, submitter: SubmitterContext, context: dict
    ) -> Optional[bool]:
        """Fire-and-forget: a failure here never reverts the indexed grant."""
        track_ids = payload.details.selected_track_ids
        program_id = payload.details.program_id
        if payload.flow_type is not FlowType.PROGRAM or not track_ids or not program_id:
            return None
        try:
            await self.indexer.assign_tracks(submitter.project_uid, track_ids, program_id)
        except Exception as exc:
            logger.error("track_assignment_failed project=%s program=%s error=%s",
                         submitter.project_uid, program_id, exc)
            self.error_reporter.report(
                f"Error assigning tracks to project {submitter.project_uid}",
                exc,
                {**context, "track_ids": track_ids, "program_id": program_id},
            )
            return False
        logger.info("tracks_assigned project=%s program=%s count=%d",
                    submitter.project_uid, program_id, len(track_ids))
        return True

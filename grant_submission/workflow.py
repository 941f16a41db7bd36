"""SubmissionWorkflow - the ordered final-submit sequence of the wizard.

Order is fixed: submittable check, duplicate check, network guard,
signature, indexer confirmation. No step is skipped or reordered.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import Config
from .errors import DuplicateDetected, NetworkMismatch
from .guards import DuplicateCandidate, DuplicateCheckResult, DuplicateSubmissionGuard, NetworkGuard
from .indexer import IndexerClient, IndexerConfirmationPoller
from .interfaces import AttestationClientFactory, WalletClient
from .models import SubmitterContext
from .models.submission_status import StatusListener
from .reporting import ErrorReporter, build_error_reporter
from .submission import AttestationSubmitter, SubmissionResult
from .wizard import WizardController

logger = logging.getLogger(__name__)


class SubmissionWorkflow:
    """Wires the guards and the submitter together for one wizard."""

    def __init__(
        self,
        indexer: IndexerClient,
        network_guard: NetworkGuard,
        submitter: AttestationSubmitter,
        error_reporter: ErrorReporter,
        duplicate_guard: Optional[DuplicateSubmissionGuard] = None,
    ) -> None:
        self.indexer = indexer
        self.network_guard = network_guard
        self.submitter = submitter
        self.error_reporter = error_reporter
        self.duplicate_guard = duplicate_guard or DuplicateSubmissionGuard()

    @classmethod
    def from_config(
        cls,
        config: Config,
        wallet: WalletClient,
        attestation_factory: AttestationClientFactory,
        status_listener: Optional[StatusListener] = None,
    ) -> "SubmissionWorkflow":
        """Wire a workflow for one wizard from environment configuration."""
        indexer = IndexerClient.from_config(config)
        poller = IndexerConfirmationPoller(
            indexer,
            max_attempts=config.indexer_poll_max_attempts,
            interval_seconds=config.indexer_poll_interval_seconds,
        )
        error_reporter = build_error_reporter(config)
        return cls(
            indexer,
            NetworkGuard.from_config(config, wallet, attestation_factory),
            AttestationSubmitter(wallet, indexer, poller, error_reporter, status_listener=status_listener),
            error_reporter,
        )

    async def check_duplicate(self, controller: WizardController, project_uid: str) -> DuplicateCheckResult:
        """Re-fetch the project's grants and evaluate the current answers."""
        data = controller.form_data
        records = await self.indexer.fetch_project_records(project_uid)
        return self.duplicate_guard.check_duplicate(
            DuplicateCandidate(
                community_uid=data.community_uid,
                title=data.title,
                program_id=data.program_id,
            ),
            records.grants,
            exclude_uid=controller.editing_grant_uid,
        )

    async def submit(
        self,
        controller: WizardController,
        submitter: SubmitterContext,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SubmissionResult:
        """Run the final submission for ``controller``'s session.

        Raises:
            ValidationError: a milestone draft is unsaved.
            WizardStateError: the wizard is not on its final step.
            DuplicateDetected: the project already has an equivalent grant.
            NetworkMismatch: the wallet is not, and cannot be put, on the community's network.
            SubmissionInProgress: a submission is already running.
        """
        controller.ensure_submittable()

        duplicate = await self.check_duplicate(controller, submitter.project_uid)
        if duplicate:
            raise DuplicateDetected(duplicate)

        required_network = controller.form_data.network_id
        try:
            attestation_client = await self.network_guard.ensure_network(required_network)
        except NetworkMismatch as exc:
            self.error_reporter.report(
                f"Network mismatch creating {controller.flow_type.value} to project {submitter.project_uid}",
                exc,
                {
                    "flow_type": controller.flow_type.value,
                    "project_uid": submitter.project_uid,
                    "address": submitter.address,
                    "required_network_id": exc.required_network_id,
                    "active_network_id": exc.active_network_id,
                },
            )
            raise

        return await self.submitter.submit(controller, attestation_client, submitter, cancel_event)

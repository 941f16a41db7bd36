"""Tests for the ordering of the final-submit sequence."""

from unittest.mock import MagicMock

import pytest

from grant_submission.errors import DuplicateDetected, NetworkMismatch, ValidationError, WizardStateError
from grant_submission.guards import NetworkGuard
from grant_submission.models import ExistingGrant, FlowType
from grant_submission.reporting import LoggingErrorReporter
from grant_submission.submission import AttestationSubmitter, SubmissionOutcome
from grant_submission.wizard import WizardController
from grant_submission.workflow import SubmissionWorkflow


@pytest.fixture
def workflow(wallet, indexer, poller, reporter, attestation_factory):
    submitter = AttestationSubmitter(wallet, indexer, poller, reporter)
    return SubmissionWorkflow(indexer, NetworkGuard(wallet, attestation_factory), submitter, reporter)


def _program_wizard(community, program):
    wizard = WizardController()
    wizard.select_flow_type(FlowType.PROGRAM)
    wizard.advance()
    wizard.select_community(community)
    wizard.select_program(program)
    wizard.advance()
    return wizard


@pytest.mark.asyncio
async def test_not_on_final_step(workflow, submitter_context, wallet):
    with pytest.raises(WizardStateError):
        await workflow.submit(WizardController(), submitter_context)
    assert wallet.signed == []


@pytest.mark.asyncio
async def test_unsaved_milestone_blocks_before_indexer_is_read(
    workflow, indexer, submitter_context, community, program
):
    wizard = _program_wizard(community, program)
    wizard.milestones.add_draft()

    with pytest.raises(ValidationError):
        await workflow.submit(wizard, submitter_context)
    assert indexer.fetch_calls == 0


@pytest.mark.asyncio
async def test_duplicate_blocks_before_network_switch(
    workflow, wallet, indexer, submitter_context, community, program
):
    wallet.active_network = 42161
    indexer.add_grant(submitter_context.project_uid, ExistingGrant(uid="0xg1", program_id="P1_42161"))
    wizard = _program_wizard(community, program)

    with pytest.raises(DuplicateDetected) as exc_info:
        await workflow.submit(wizard, submitter_context)

    assert exc_info.value.result.matched_grant.uid == "0xg1"
    assert wallet.switch_requests == []
    assert wallet.signed == []


@pytest.mark.asyncio
async def test_network_mismatch_is_reported_and_raised(
    workflow, wallet, reporter, submitter_context, community, program
):
    wallet.active_network = 42161
    wallet.switch_error = RuntimeError("User rejected the request")
    wizard = _program_wizard(community, program)

    with pytest.raises(NetworkMismatch):
        await workflow.submit(wizard, submitter_context)

    assert wallet.signed == []
    assert len(reporter.reports) == 1
    context = reporter.reports[0][2]
    assert context["required_network_id"] == 10
    assert context["active_network_id"] == 42161


@pytest.mark.asyncio
async def test_switches_network_then_submits(workflow, wallet, indexer, submitter_context, community, program):
    wallet.active_network = 42161
    wallet.on_broadcast = lambda receipt: indexer.publish_after(
        submitter_context.project_uid, ExistingGrant(uid=receipt.attestation_uid), fetches=1
    )
    wizard = _program_wizard(community, program)

    result = await workflow.submit(wizard, submitter_context)

    assert wallet.switch_requests == [10]
    assert result.outcome is SubmissionOutcome.INDEXED


@pytest.mark.asyncio
async def test_editing_grant_is_not_its_own_duplicate(workflow, indexer, submitter_context):
    existing = ExistingGrant(uid="0xg1", community_uid="C1", title="Infra grant", description="Tooling")
    indexer.add_grant(submitter_context.project_uid, existing)
    wizard = WizardController.for_existing_grant(existing, network_id=10)

    result = await workflow.check_duplicate(wizard, submitter_context.project_uid)

    assert not result


def test_from_config_wires_environment_and_polling(wallet, attestation_factory):
    config = MagicMock(
        gap_env="staging",
        indexer_url="https://indexer.test",
        indexer_timeout_seconds=5.0,
        indexer_poll_max_attempts=20,
        indexer_poll_interval_seconds=0.5,
        error_tracking_enabled=False,
    )

    workflow = SubmissionWorkflow.from_config(config, wallet, attestation_factory)

    assert workflow.network_guard.environment == "staging"
    assert workflow.indexer.base_url == "https://indexer.test"
    assert workflow.submitter.poller.max_attempts == 20
    assert workflow.submitter.poller.interval_seconds == 0.5
    assert isinstance(workflow.error_reporter, LoggingErrorReporter)
    assert workflow.submitter.error_reporter is workflow.error_reporter

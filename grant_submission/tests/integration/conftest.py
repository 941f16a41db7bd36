"""Integration fixtures: a full workflow wired to in-memory collaborators."""

import pytest

from grant_submission.guards import NetworkGuard
from grant_submission.submission import AttestationSubmitter
from grant_submission.workflow import SubmissionWorkflow


@pytest.fixture
def statuses():
    return []


@pytest.fixture
def workflow(wallet, indexer, poller, reporter, attestation_factory, statuses):
    submitter = AttestationSubmitter(
        wallet, indexer, poller, reporter, status_listener=lambda prev, cur: statuses.append(cur.value)
    )
    return SubmissionWorkflow(indexer, NetworkGuard(wallet, attestation_factory), submitter, reporter)

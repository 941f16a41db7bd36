"""Pytest configuration and in-memory collaborators."""

from typing import Any, Callable, Optional

import pytest

from grant_submission.indexer import IndexerConfirmationPoller
from grant_submission.interfaces import AttestationClient, AttestationClientFactory, WalletClient
from grant_submission.models import (
    Community,
    ExistingGrant,
    FundingProgram,
    ProjectRecordSet,
    SubmitterContext,
    TransactionReceipt,
)
from grant_submission.reporting import ErrorReporter

SUBMITTER_ADDRESS = "0x" + "a" * 40
PROJECT_UID = "0xproject"


class MockIndexer:
    """In-memory replacement for IndexerClient."""

    def __init__(self):
        self.grants: dict[str, list[ExistingGrant]] = {}
        self._pending: list[list[Any]] = []
        self.fetch_calls = 0
        self.fetch_error: Optional[Exception] = None
        self.notified: list[tuple[str, int]] = []
        self.track_assignments: list[tuple[str, list[str], str]] = []
        self.assign_error: Optional[Exception] = None

    def add_grant(self, project_uid: str, grant: ExistingGrant) -> None:
        self.grants.setdefault(project_uid, []).append(grant)

    def publish_after(self, project_uid: str, grant: ExistingGrant, fetches: int) -> None:
        """Make ``grant`` visible on the ``fetches``-th fetch from now."""
        self._pending.append([project_uid, grant, fetches])

    async def fetch_project_records(self, project_uid: str, retry: bool = True) -> ProjectRecordSet:
        self.fetch_calls += 1
        for entry in list(self._pending):
            entry[2] -= 1
            if entry[2] <= 0:
                self._pending.remove(entry)
                self.add_grant(entry[0], entry[1])
        if self.fetch_error is not None:
            raise self.fetch_error
        return ProjectRecordSet(project_uid=project_uid, grants=list(self.grants.get(project_uid, [])))

    async def notify_transaction(self, tx_hash: str, network_id: int) -> None:
        self.notified.append((tx_hash, network_id))

    async def assign_tracks(self, project_uid: str, track_ids: list[str], program_id: str) -> None:
        if self.assign_error is not None:
            raise self.assign_error
        self.track_assignments.append((project_uid, list(track_ids), program_id))


class FakeAttestationClient(AttestationClient):
    def __init__(self, network_id: int):
        self._network_id = network_id
        self.built: list[Any] = []
        self.build_error: Optional[Exception] = None

    @property
    def network_id(self) -> int:
        return self._network_id

    def build_grant(self, payload: Any) -> Any:
        if self.build_error is not None:
            raise self.build_error
        self.built.append(payload)
        return {"network_id": self._network_id, "payload": payload}


class FakeAttestationFactory(AttestationClientFactory):
    def __init__(self):
        self.clients: list[FakeAttestationClient] = []

    def for_network(self, network_id: int) -> FakeAttestationClient:
        client = FakeAttestationClient(network_id)
        self.clients.append(client)
        return client


class FakeWallet(WalletClient):
    """Wallet double. ``on_broadcast`` sees every receipt it hands out."""

    def __init__(
        self,
        active_network: int = 10,
        address: str = SUBMITTER_ADDRESS,
        on_broadcast: Optional[Callable[[TransactionReceipt], None]] = None,
    ):
        self._address = address
        self.active_network = active_network
        self.on_broadcast = on_broadcast
        self.switch_requests: list[int] = []
        self.switch_error: Optional[Exception] = None
        self.sign_error: Optional[Exception] = None
        self.signed: list[Any] = []
        self.attestation_uid = "0xgrant1"
        self.tx_hashes = ["0xtx1"]

    @property
    def address(self) -> str:
        return self._address

    async def get_active_network(self) -> int:
        return self.active_network

    async def switch_network(self, network_id: int) -> None:
        self.switch_requests.append(network_id)
        if self.switch_error is not None:
            raise self.switch_error
        self.active_network = network_id

    async def sign_and_submit(self, attestation: Any) -> TransactionReceipt:
        if self.sign_error is not None:
            raise self.sign_error
        self.signed.append(attestation)
        receipt = TransactionReceipt(
            attestation_uid=self.attestation_uid,
            tx_hashes=list(self.tx_hashes),
            network_id=self.active_network,
        )
        if self.on_broadcast is not None:
            self.on_broadcast(receipt)
        return receipt


class RecordingReporter(ErrorReporter):
    def __init__(self):
        self.reports: list[tuple[str, Optional[BaseException], dict]] = []

    def report(self, message, error, context) -> None:
        self.reports.append((message, error, dict(context)))


class SleepRecorder:
    """Stand-in for asyncio.sleep that returns immediately."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def indexer():
    return MockIndexer()


@pytest.fixture
def wallet():
    return FakeWallet()


@pytest.fixture
def attestation_factory():
    return FakeAttestationFactory()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def poller(indexer, sleep):
    return IndexerConfirmationPoller(indexer, max_attempts=10, interval_seconds=1.5, sleep=sleep)


@pytest.fixture
def community():
    return Community(uid="C1", name="Optimism", network_id=10)


@pytest.fixture
def program():
    return FundingProgram(program_id="P1_10", title="Retro Funding", network_id=10)


@pytest.fixture
def submitter_context():
    return SubmitterContext(address=SUBMITTER_ADDRESS, project_uid=PROJECT_UID)

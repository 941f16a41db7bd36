"""Collaborator interfaces the workflow consumes.

Concrete wallets and attestation SDK bindings live outside this package;
they only need to implement these methods.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import TransactionReceipt


class AttestationClient(ABC):
    """Builds signable attestations on one network."""

    @property
    @abstractmethod
    def network_id(self) -> int:
        pass

    @abstractmethod
    def build_grant(self, payload: Any) -> Any:
        """Turn a GrantSubmissionPayload into the SDK's grant attestation (with details
        and milestones attached). The returned object is opaque to this package.
        """
        pass


class AttestationClientFactory(ABC):
    @abstractmethod
    def for_network(self, network_id: int) -> AttestationClient:
        pass


class WalletClient(ABC):
    """Connected wallet able to switch networks and sign."""

    @property
    @abstractmethod
    def address(self) -> str:
        pass

    @abstractmethod
    async def get_active_network(self) -> int:
        pass

    @abstractmethod
    async def switch_network(self, network_id: int) -> None:
        """Ask the wallet to switch. Raises on rejection."""
        pass

    @abstractmethod
    async def sign_and_submit(self, attestation: Any) -> TransactionReceipt:
        """Sign and broadcast. Raises SignatureRejected if the user declines."""
        pass

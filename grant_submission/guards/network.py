"""NetworkGuard - make sure signing happens on the community's network."""

import logging
from typing import Any

from ..errors import NetworkMismatch
from ..interfaces import AttestationClient, AttestationClientFactory, WalletClient
from .chains import get_chain_name_by_id, is_supported_network

logger = logging.getLogger(__name__)


class NetworkGuard:
    """Compares the wallet's network with the required one and switches if needed."""

    def __init__(
        self,
        wallet: WalletClient,
        attestation_factory: AttestationClientFactory,
        environment: str = "production",
    ) -> None:
        self.wallet = wallet
        self.attestation_factory = attestation_factory
        self.environment = environment

    @classmethod
    def from_config(
        cls, config: Any, wallet: WalletClient, attestation_factory: AttestationClientFactory
    ) -> "NetworkGuard":
        """Guard for the networks of ``config.gap_env`` (production or staging)."""
        return cls(wallet, attestation_factory, environment=config.gap_env)

    async def ensure_network(self, required_network_id: int) -> AttestationClient:
        """Return an attestation client bound to ``required_network_id``.

        Raises:
            NetworkMismatch: the network is not an attestation network, or the
                wallet refused / failed to switch. Nothing has been built yet.
        """
        if not is_supported_network(required_network_id, self.environment):
            raise NetworkMismatch(
                f"Network {required_network_id} is not supported for attestations",
                required_network_id=required_network_id,
            )

        active = await self.wallet.get_active_network()
        if active == required_network_id:
            return self.attestation_factory.for_network(required_network_id)

        logger.info(
            "network_switch_requested from=%s to=%s (%s)",
            active,
            required_network_id,
            get_chain_name_by_id(required_network_id),
        )
        try:
            await self.wallet.switch_network(required_network_id)
        except Exception as exc:
            logger.warning("network_switch_failed to=%s error=%s", required_network_id, exc)
            raise NetworkMismatch(
                f"Please switch to {get_chain_name_by_id(required_network_id)} to continue",
                required_network_id=required_network_id,
                active_network_id=active,
            ) from exc

        return self.attestation_factory.for_network(required_network_id)

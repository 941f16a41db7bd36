"""Networks the attestation contracts are deployed on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Chain:
    id: int
    name: str
    explorer_url: str
    testnet: bool = False


CHAINS: dict[int, Chain] = {
    1: Chain(1, "mainnet", "https://etherscan.io"),
    10: Chain(10, "optimism", "https://optimistic.etherscan.io"),
    42161: Chain(42161, "arbitrum", "https://arbiscan.io"),
    8453: Chain(8453, "base", "https://basescan.org"),
    137: Chain(137, "polygon", "https://polygonscan.com"),
    42220: Chain(42220, "celo", "https://celoscan.io"),
    1329: Chain(1329, "sei", "https://seitrace.com"),
    1135: Chain(1135, "lisk", "https://blockscout.lisk.com"),
    534352: Chain(534352, "scroll", "https://scrollscan.com"),
    11155111: Chain(11155111, "sepolia", "https://sepolia.etherscan.io", testnet=True),
    11155420: Chain(11155420, "optimism-sepolia", "https://sepolia-optimism.etherscan.io", testnet=True),
    84532: Chain(84532, "base-sepolia", "https://sepolia.basescan.org", testnet=True),
}

# Mainnet, Base and Polygon host communities but no attestation schemas
PRODUCTION_NETWORKS = (10, 42161, 42220, 1329, 1135, 534352)
STAGING_NETWORKS = (11155111, 11155420, 84532)

_NAME_ALIASES = {
    "ethereum": "mainnet",
    "arbitrum-one": "arbitrum",
    "matic": "polygon",
    "base sepolia": "base-sepolia",
    "basesepolia": "base-sepolia",
}

FALLBACK_EXPLORER = "https://www.oklink.com/multi-search#key="


def supported_networks(environment: str = "production") -> tuple[int, ...]:
    return STAGING_NETWORKS if environment == "staging" else PRODUCTION_NETWORKS


def is_supported_network(chain_id: Optional[int], environment: str = "production") -> bool:
    return chain_id is not None and chain_id in supported_networks(environment)


def get_chain_name_by_id(chain_id: int) -> Optional[str]:
    chain = CHAINS.get(chain_id)
    return chain.name if chain else None


def get_chain_id_by_name(name: str) -> Optional[int]:
    key = name.strip().lower()
    key = _NAME_ALIASES.get(key, key)
    for chain in CHAINS.values():
        if chain.name == key:
            return chain.id
    return None


def get_explorer_url(chain_id: int, tx_hash: str) -> str:
    chain = CHAINS.get(chain_id)
    if chain is None:
        return f"{FALLBACK_EXPLORER}{tx_hash}"
    return f"{chain.explorer_url}/tx/{tx_hash}"

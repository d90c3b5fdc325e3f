# MIT License
# Copyright (c) 2025 Hashborn

from typing import Dict
from pydantic import BaseModel, ConfigDict, Field
from ..types.common import ModuleName, UnknownNetworkError
from ..crypto.hash import sha256

# Global Constants
ADDRESS_PREFIX = "lsk"
BINARY_ADDRESS_LENGTH = 20
LEGACY_ADDRESS_LENGTH = 8
TOKEN_ID_LENGTH = 8

MODULE_NAME_TOKEN = ModuleName.TOKEN.value
MODULE_NAME_POS = ModuleName.POS.value
MODULE_NAME_LEGACY = ModuleName.LEGACY.value

# Round-robin forging schedule
NUMBER_ACTIVE_VALIDATORS = 101
NUMBER_STANDBY_VALIDATORS = 2
ROUND_LENGTH = NUMBER_ACTIVE_VALIDATORS + NUMBER_STANDBY_VALIDATORS
POS_INIT_ROUNDS = 587
MAX_COMMISSION = 10000  # basis points (100%)

# Placeholder keys for validators that never registered them
INVALID_BLS_KEY = bytes(48).hex()
INVALID_ED25519_KEY = (b"\xff" * 32).hex()
DUMMY_PROOF_OF_POSSESSION = bytes(96).hex()
Q96_ZERO = b""

# Holds every migrated legacy balance
ADDRESS_LEGACY_RESERVE = sha256(b"legacyReserve")[:BINARY_ADDRESS_LENGTH]


class NetworkConfig(BaseModel):
    """Per-network constants, resolved once from the node's network identifier."""
    model_config = ConfigDict(frozen=True)

    name: str
    network_identifier: str = Field(..., description="Hex network identifier reported by the legacy node")
    token_id: str = Field(..., pattern=r"^[0-9a-f]{16}$", description="Native token ID (hex)")
    prev_snapshot_block_height: int = Field(default=0, ge=0, description="Height the legacy chain was bootstrapped from")


class MigrationConfig(BaseModel):
    """Everything a genesis build needs besides the snapshot data itself."""
    model_config = ConfigDict(frozen=True)

    network: NetworkConfig
    snapshot_height: int = Field(..., ge=0)

    @property
    def token_id(self) -> str:
        return self.network.token_id


NETWORKS: Dict[str, NetworkConfig] = {
    "4c09e6a781fc4c7bdb936ee815de8f94190f8a7519becd9de2081832be309a99": NetworkConfig(
        name="mainnet",
        network_identifier="4c09e6a781fc4c7bdb936ee815de8f94190f8a7519becd9de2081832be309a99",
        token_id="0000000000000000",
        prev_snapshot_block_height=16270293,
    ),
    "15f0dacc1060e91818224a94286b13aa04279c640bd5d6f193182031d133df7c": NetworkConfig(
        name="testnet",
        network_identifier="15f0dacc1060e91818224a94286b13aa04279c640bd5d6f193182031d133df7c",
        token_id="0100000000000000",
        prev_snapshot_block_height=14075260,
    ),
}


def get_network_config(network_identifier: str) -> NetworkConfig:
    """Looks up a network by identifier or by name ("mainnet", "testnet")."""
    if network_identifier in NETWORKS:
        return NETWORKS[network_identifier]
    for config in NETWORKS.values():
        if config.name == network_identifier:
            return config
    raise UnknownNetworkError(f"Unknown network: {network_identifier}")

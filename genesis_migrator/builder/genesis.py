# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis Assets Builder

Runs the module asset builders over one snapshot input and assembles the
result. Both binary chain state entries are decoded before any asset is
built, so a malformed snapshot produces no output at all.
"""

import logging
from typing import Optional

from .assets.legacy import add_legacy_module_entry, decode_legacy_accounts, decode_vote_weights
from .assets.token import add_token_module_entry
from .assets.pos import add_pos_module_entry, get_validator_keys
from .snapshot.types import SnapshotInput
from ..protocol.types.common import DataIntegrityError
from ..protocol.types.genesis import GenesisAssets
from ..protocol.config.params import MigrationConfig, get_network_config

logger = logging.getLogger(__name__)


def config_from_snapshot(snapshot: SnapshotInput) -> MigrationConfig:
    """Resolves the network constants once, from the snapshot's network identifier."""
    network = get_network_config(snapshot.network_identifier)
    return MigrationConfig(network=network, snapshot_height=snapshot.height)


class GenesisAssetsBuilder:
    """
    Builds the token, pos and legacy module assets for one migration.
    """

    def __init__(self, config: MigrationConfig):
        self.config = config

    def build(self, snapshot: SnapshotInput) -> GenesisAssets:
        """
        Args:
            snapshot: Materialised snapshot input

        Returns:
            Assets sorted by module name

        Raises:
            DecodeError: If a chain state blob is malformed
            MissingRoundDataError: If vote weights lack the selection round
            DataIntegrityError: If the snapshot contradicts the configuration
        """
        if snapshot.height != self.config.snapshot_height:
            raise DataIntegrityError(
                f"Snapshot height {snapshot.height} does not match configured "
                f"height {self.config.snapshot_height}"
            )

        network = self.config.network
        logger.info(
            f"Building genesis assets for {network.name} at height {self.config.snapshot_height} "
            f"(token {network.token_id})"
        )

        legacy_accounts = decode_legacy_accounts(snapshot.legacy_accounts)
        vote_weights = decode_vote_weights(snapshot.vote_weights)
        validator_keys = get_validator_keys(snapshot.accounts, snapshot.public_keys)

        token_entry = add_token_module_entry(snapshot.accounts, legacy_accounts, network.token_id)
        pos_entry = add_pos_module_entry(
            snapshot.accounts,
            vote_weights,
            validator_keys,
            self.config.snapshot_height,
            network.prev_snapshot_block_height,
            network.token_id,
        )
        legacy_entry = add_legacy_module_entry(legacy_accounts)

        assets = sorted([token_entry, pos_entry, legacy_entry], key=lambda entry: entry.module)
        return GenesisAssets(assets=assets)


def build_genesis_assets(snapshot: SnapshotInput, config: Optional[MigrationConfig] = None) -> GenesisAssets:
    if config is None:
        config = config_from_snapshot(snapshot)
    return GenesisAssetsBuilder(config).build(snapshot)

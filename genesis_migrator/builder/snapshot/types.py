# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Input Data Structures

Everything fetched from the legacy node, fully materialised before any
genesis asset is built.
"""

from pydantic import Field
from typing import List
from ...protocol.types.account import Account
from ...protocol.types.base import SnapshotModel, HexBytes


class SnapshotInput(SnapshotModel):
    """
    Frozen legacy chain state at the snapshot height (loaded from disk).
    """
    network_identifier: str = Field(..., description="Network identifier or name (mainnet/testnet)")
    height: int = Field(..., ge=0, description="Snapshot block height")
    accounts: List[Account] = Field(default_factory=list, description="All accounts at the snapshot height")
    legacy_accounts: HexBytes = Field(default=b"", description="Encoded unregistered addresses chain state")
    vote_weights: HexBytes = Field(default=b"", description="Encoded delegate vote weights chain state")
    public_keys: List[HexBytes] = Field(
        default_factory=list,
        description="Block generator and transaction sender public keys seen on chain",
    )

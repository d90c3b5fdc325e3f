# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import Field
from typing import List, Optional
from .base import SnapshotModel, Address, Amount, Height, HexBytes
from ..config.params import MAX_COMMISSION

class SharingCoefficient(SnapshotModel):
    """Per-token reward sharing coefficient snapshot (Q96 fixed point bytes)."""
    token_id: HexBytes = Field(..., alias="tokenID", min_length=8, max_length=8)
    coefficient: HexBytes = b""

class SentVote(SnapshotModel):
    delegate_address: Address
    amount: Amount
    # Chronological append order; never re-sorted
    sharing_coefficients: List[SharingCoefficient] = Field(default_factory=list)

class UnlockingEntry(SnapshotModel):
    delegate_address: Address
    amount: Amount
    unvote_height: Height

class DelegateRecord(SnapshotModel):
    """Delegate (validator) registration of an account."""
    username: str = ""
    last_forged_height: Height = 0
    is_banned: bool = False
    pom_heights: List[Height] = Field(default_factory=list)
    consecutive_missed_blocks: int = Field(default=0, ge=0)
    total_votes_received: Amount = 0

    # Registration keys, absent on chains that predate them
    bls_key: Optional[HexBytes] = None
    proof_of_possession: Optional[HexBytes] = None
    generator_key: Optional[HexBytes] = None

    commission: Optional[int] = Field(default=None, ge=0, le=MAX_COMMISSION)
    last_commission_increase_height: Optional[Height] = None
    sharing_coefficients: List[SharingCoefficient] = Field(default_factory=list)

    @property
    def is_registered(self) -> bool:
        return self.username != ""

class DposState(SnapshotModel):
    delegate: Optional[DelegateRecord] = None
    sent_votes: List[SentVote] = Field(default_factory=list)
    unlocking: List[UnlockingEntry] = Field(default_factory=list)

class TokenState(SnapshotModel):
    balance: Amount = 0

class SequenceState(SnapshotModel):
    nonce: int = Field(default=0, ge=0)

class KeysState(SnapshotModel):
    mandatory_keys: List[HexBytes] = Field(default_factory=list)
    optional_keys: List[HexBytes] = Field(default_factory=list)
    number_of_signatures: int = Field(default=0, ge=0)

class Account(SnapshotModel):
    address: Address
    token: TokenState = Field(default_factory=TokenState)
    sequence: SequenceState = Field(default_factory=SequenceState)
    keys: KeysState = Field(default_factory=KeysState)
    dpos: DposState = Field(default_factory=DposState)

    @property
    def is_validator(self) -> bool:
        return self.dpos.delegate is not None and self.dpos.delegate.is_registered

    @property
    def is_staker(self) -> bool:
        return bool(self.dpos.sent_votes or self.dpos.unlocking)

# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import Field
from typing import List, Optional
from .base import SnapshotModel, Address, Amount

class DelegateWeight(SnapshotModel):
    address: Address
    vote_weight: Amount

class RoundVoteWeights(SnapshotModel):
    """Delegates and their vote weights as recorded for one round."""
    round: int = Field(..., ge=0)
    delegates: List[DelegateWeight] = Field(default_factory=list)

class VoteWeights(SnapshotModel):
    vote_weights: List[RoundVoteWeights] = Field(default_factory=list)

    def get_round(self, round: int) -> Optional[RoundVoteWeights]:
        for entry in self.vote_weights:
            if entry.round == round:
                return entry
        return None

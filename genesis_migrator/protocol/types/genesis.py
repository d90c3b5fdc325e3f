# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis Asset Data Structures

Output side of the migration. Every address here is the human-readable
form and every amount a decimal string; binary addresses never reach
these models.
"""

import json
from typing import Annotated, List, Literal, Union
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from ..crypto.addresses import decode_address
from ..crypto.hash import sha256_hex


def _check_address_checksum(value: str) -> str:
    decode_address(value)
    return value


Lisk32Address = Annotated[str, Field(pattern=r"^lsk[a-z2-9]{38}$"), AfterValidator(_check_address_checksum)]
DecimalString = Annotated[str, Field(pattern=r"^(0|[1-9][0-9]*)$")]
HexString = Annotated[str, Field(pattern=r"^([0-9a-f]{2})*$")]
TokenID = Annotated[str, Field(pattern=r"^[0-9a-f]{16}$")]


class GenesisModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════
# TOKEN MODULE
# ═══════════════════════════════════════════════════════════════════

class LockedBalance(GenesisModel):
    module: str
    amount: DecimalString

class UserSubstoreEntry(GenesisModel):
    address: Lisk32Address
    token_id: TokenID = Field(..., alias="tokenID")
    available_balance: DecimalString
    locked_balances: List[LockedBalance] = Field(default_factory=list)

class SupplySubstoreEntry(GenesisModel):
    token_id: TokenID = Field(..., alias="tokenID")
    total_supply: DecimalString

class TokenModuleData(GenesisModel):
    user_substore: List[UserSubstoreEntry]
    supply_substore: List[SupplySubstoreEntry]
    escrow_substore: List[dict] = Field(default_factory=list)
    supported_tokens_substore: List[dict] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════
# POS MODULE
# ═══════════════════════════════════════════════════════════════════

class SharingCoefficientEntry(GenesisModel):
    token_id: TokenID = Field(..., alias="tokenID")
    coefficient: HexString = ""

class ValidatorEntry(GenesisModel):
    address: Lisk32Address
    name: str
    bls_key: HexString
    proof_of_possession: HexString
    generator_key: HexString
    last_generated_height: int = Field(..., ge=0)
    is_banned: bool
    report_misbehavior_heights: List[int]
    consecutive_missed_blocks: int = Field(..., ge=0)
    last_commission_increase_height: int = Field(..., ge=0)
    commission: int = Field(..., ge=0)
    sharing_coefficients: List[SharingCoefficientEntry]

class StakeEntry(GenesisModel):
    validator_address: Lisk32Address
    amount: DecimalString
    sharing_coefficients: List[SharingCoefficientEntry]

class PendingUnlockEntry(GenesisModel):
    validator_address: Lisk32Address
    amount: DecimalString
    unstake_height: int = Field(..., ge=0)

class StakerEntry(GenesisModel):
    address: Lisk32Address
    stakes: List[StakeEntry]
    pending_unlocks: List[PendingUnlockEntry]

class GenesisData(GenesisModel):
    init_rounds: int = Field(..., gt=0)
    init_validators: List[Lisk32Address]

class PoSModuleData(GenesisModel):
    validators: List[ValidatorEntry]
    stakers: List[StakerEntry]
    genesis_data: GenesisData


# ═══════════════════════════════════════════════════════════════════
# LEGACY MODULE
# ═══════════════════════════════════════════════════════════════════

class LegacyStoreEntry(GenesisModel):
    address: HexString
    balance: DecimalString

class LegacyModuleData(GenesisModel):
    accounts: List[LegacyStoreEntry]


# ═══════════════════════════════════════════════════════════════════
# ASSETS
# ═══════════════════════════════════════════════════════════════════

class TokenAssetEntry(GenesisModel):
    module: Literal["token"] = "token"
    data: TokenModuleData

class PoSAssetEntry(GenesisModel):
    module: Literal["pos"] = "pos"
    data: PoSModuleData

class LegacyAssetEntry(GenesisModel):
    module: Literal["legacy"] = "legacy"
    data: LegacyModuleData

GenesisAssetEntry = Annotated[
    Union[TokenAssetEntry, PoSAssetEntry, LegacyAssetEntry],
    Field(discriminator="module"),
]


class GenesisAssets(GenesisModel):
    """
    Module assets seeding the new chain's genesis block, sorted by module name.
    """
    assets: List[GenesisAssetEntry]

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

    def canonical_json(self) -> str:
        """Compact JSON with sorted keys; identical inputs give identical bytes."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(',', ':'))

    def calculate_hash(self) -> str:
        """
        Calculate SHA256 hash of the canonical JSON.

        Operators building from the same snapshot compare this digest.
        """
        return sha256_hex(self.canonical_json().encode())

    def get_module(self, module: str):
        for entry in self.assets:
            if entry.module == module:
                return entry
        return None

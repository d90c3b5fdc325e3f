# MIT License
# Copyright (c) 2025 Hashborn

"""
Legacy Module Assets

Decodes the binary chain state entries the migration reads: unregistered
legacy accounts and per-round delegate vote weights. A blob that does not
match its schema aborts the build; nothing is decoded partially.
"""

import logging
from dataclasses import dataclass
from typing import List

from ...protocol.codec import decode, UNREGISTERED_ADDRESSES_SCHEMA, VOTE_WEIGHTS_SCHEMA
from ...protocol.types.common import DecodeError
from ...protocol.types.genesis import LegacyStoreEntry, LegacyModuleData, LegacyAssetEntry
from ...protocol.types.validator import VoteWeights
from ...protocol.config.params import LEGACY_ADDRESS_LENGTH, BINARY_ADDRESS_LENGTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegacyAccount:
    """Unregistered account of the legacy chain (8-byte legacy address)."""
    address: bytes
    balance: int


def decode_legacy_accounts(blob: bytes) -> List[LegacyAccount]:
    """
    Decodes the unregistered addresses blob.

    Raises:
        DecodeError: If the blob does not match the schema
    """
    decoded = decode(UNREGISTERED_ADDRESSES_SCHEMA, blob)

    accounts = []
    for entry in decoded["unregisteredAddresses"]:
        address = entry["address"]
        if len(address) not in (LEGACY_ADDRESS_LENGTH, BINARY_ADDRESS_LENGTH):
            raise DecodeError(f"Invalid legacy address length {len(address)}")
        accounts.append(LegacyAccount(address=address, balance=entry["balance"]))

    logger.info(f"Decoded {len(accounts)} unregistered legacy accounts")
    return accounts


def decode_vote_weights(blob: bytes) -> VoteWeights:
    """
    Decodes the per-round delegate vote weights snapshot.

    Raises:
        DecodeError: If the blob does not match the schema
    """
    decoded = decode(VOTE_WEIGHTS_SCHEMA, blob)

    for round_entry in decoded["voteWeights"]:
        for delegate in round_entry["delegates"]:
            if len(delegate["address"]) != BINARY_ADDRESS_LENGTH:
                raise DecodeError(f"Invalid delegate address length {len(delegate['address'])}")

    vote_weights = VoteWeights.model_validate(decoded)
    logger.info(f"Decoded vote weights for {len(vote_weights.vote_weights)} rounds")
    return vote_weights


def create_legacy_store(legacy_accounts: List[LegacyAccount]) -> List[LegacyStoreEntry]:
    return [
        LegacyStoreEntry(address=account.address.hex(), balance=str(account.balance))
        for account in legacy_accounts
    ]


def add_legacy_module_entry(legacy_accounts: List[LegacyAccount]) -> LegacyAssetEntry:
    return LegacyAssetEntry(data=LegacyModuleData(accounts=create_legacy_store(legacy_accounts)))

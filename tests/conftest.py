# MIT License
# Copyright (c) 2025 Hashborn

import pytest
from ecdsa import SigningKey, Ed25519 # type: ignore
from genesis_migrator.protocol.types.account import (
    Account,
    DelegateRecord,
    DposState,
    SentVote,
    TokenState,
    UnlockingEntry,
)
from genesis_migrator.protocol.codec import encode, UNREGISTERED_ADDRESSES_SCHEMA, VOTE_WEIGHTS_SCHEMA
from genesis_migrator.protocol.crypto.hash import sha256

TOKEN_ID = "0400000000000000"


def make_address(seed: str) -> bytes:
    """Deterministic 20-byte test address."""
    return sha256(seed.encode())[:20]


def make_public_key(passphrase: str) -> bytes:
    """Ed25519 public key of a legacy wallet (seed = SHA256 of the passphrase)."""
    seed = sha256(passphrase.encode("utf-8"))
    return SigningKey.from_string(seed, curve=Ed25519).get_verifying_key().to_string()


def make_legacy_address(public_key: bytes) -> bytes:
    """8-byte pre-migration address: first eight bytes of SHA256, reversed."""
    return sha256(public_key)[:8][::-1]


def make_account(address, balance=0, votes=(), unlocking=(), delegate=None) -> Account:
    """
    Args:
        votes: (delegate_address, amount) pairs
        unlocking: (delegate_address, amount, unvote_height) triples
        delegate: DelegateRecord, or a username string
    """
    if isinstance(delegate, str):
        delegate = DelegateRecord(username=delegate)

    return Account(
        address=address,
        token=TokenState(balance=balance),
        dpos=DposState(
            delegate=delegate,
            sent_votes=[SentVote(delegate_address=a, amount=amt) for a, amt in votes],
            unlocking=[UnlockingEntry(delegate_address=a, amount=amt, unvote_height=h) for a, amt, h in unlocking],
        ),
    )


def encode_legacy_accounts(entries) -> bytes:
    """entries: (address_bytes, balance) pairs"""
    return encode(UNREGISTERED_ADDRESSES_SCHEMA, {
        "unregisteredAddresses": [{"address": a, "balance": b} for a, b in entries],
    })


def encode_vote_weights(rounds) -> bytes:
    """rounds: {round: [(address_bytes, vote_weight), ...]}"""
    return encode(VOTE_WEIGHTS_SCHEMA, {
        "voteWeights": [
            {
                "round": r,
                "delegates": [{"address": a, "voteWeight": w} for a, w in delegates],
            }
            for r, delegates in rounds.items()
        ],
    })


@pytest.fixture
def token_id():
    return TOKEN_ID


@pytest.fixture
def sample_accounts():
    """A validator, a voter that is also a validator, and a plain holder."""
    val_1 = make_address("validator_1")
    val_2 = make_address("validator_2")
    holder = make_address("holder")

    return [
        make_account(val_1, balance=1000, delegate="genesis_1"),
        make_account(
            val_2,
            balance=500,
            votes=[(val_1, 200), (val_2, 300)],
            unlocking=[(val_1, 50, 90)],
            delegate="genesis_2",
        ),
        make_account(holder, balance=75),
    ]

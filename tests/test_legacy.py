# MIT License
# Copyright (c) 2025 Hashborn

import pytest

from genesis_migrator.builder.assets.legacy import (
    add_legacy_module_entry,
    decode_legacy_accounts,
    decode_vote_weights,
)
from genesis_migrator.protocol.types.common import DecodeError
from conftest import encode_legacy_accounts, encode_vote_weights, make_address, make_legacy_address, make_public_key

PASSPHRASES = [
    "float slow tiny rubber seat lion arrow skirt reveal garlic draft shield",
    "hand nominee keen alarm skate latin seek fox spring guilt loop snake",
    "february large secret save risk album opera rebel tray roast air captain",
]


@pytest.fixture
def legacy_entries():
    entries = []
    for i, passphrase in enumerate(PASSPHRASES):
        entries.append((make_legacy_address(make_public_key(passphrase)), (i + 1) * 1000))
    return entries


def test_decode_legacy_accounts(legacy_entries):
    accounts = decode_legacy_accounts(encode_legacy_accounts(legacy_entries))

    assert [(a.address, a.balance) for a in accounts] == legacy_entries
    assert all(len(a.address) == 8 for a in accounts)


def test_legacy_module_entry(legacy_entries):
    entry = add_legacy_module_entry(decode_legacy_accounts(encode_legacy_accounts(legacy_entries)))
    data = entry.model_dump(by_alias=True)

    assert data["module"] == "legacy"
    assert len(data["data"]["accounts"]) == 3
    for account, (address, balance) in zip(data["data"]["accounts"], legacy_entries):
        assert list(account.keys()) == ["address", "balance"]
        assert account["address"] == address.hex()
        assert account["balance"] == str(balance)


def test_empty_blob_has_no_accounts():
    assert decode_legacy_accounts(b"") == []


def test_malformed_blob_rejected():
    with pytest.raises(DecodeError):
        decode_legacy_accounts(b"\xff\xff\xff")


def test_truncated_blob_rejected(legacy_entries):
    blob = encode_legacy_accounts(legacy_entries)

    with pytest.raises(DecodeError):
        decode_legacy_accounts(blob[:-1])


def test_wrong_schema_rejected():
    blob = encode_vote_weights({103: [(make_address("d"), 10)]})

    with pytest.raises(DecodeError):
        decode_legacy_accounts(blob)


def test_invalid_address_length_rejected():
    blob = encode_legacy_accounts([(b"\x01\x02\x03", 5)])

    with pytest.raises(DecodeError):
        decode_legacy_accounts(blob)


def test_decode_vote_weights():
    d1 = make_address("d1")
    d2 = make_address("d2")
    blob = encode_vote_weights({102: [(d1, 5)], 103: [(d1, 10), (d2, 2**63)]})

    vote_weights = decode_vote_weights(blob)

    assert [r.round for r in vote_weights.vote_weights] == [102, 103]
    round_103 = vote_weights.get_round(103)
    assert [(d.address, d.vote_weight) for d in round_103.delegates] == [(d1, 10), (d2, 2**63)]
    assert vote_weights.get_round(104) is None


def test_decode_vote_weights_rejects_legacy_blob(legacy_entries):
    with pytest.raises(DecodeError):
        decode_vote_weights(encode_legacy_accounts(legacy_entries))

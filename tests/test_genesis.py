# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis Build Tests

End-to-end build from a snapshot input: module assembly, determinism,
all-or-nothing failure, persistence and the CLI.
"""

import gzip
import json
import pytest
from pydantic import ValidationError as PydanticValidationError

from genesis_migrator.builder.assets.legacy import add_legacy_module_entry, decode_legacy_accounts
from genesis_migrator.builder.genesis import GenesisAssetsBuilder, build_genesis_assets, config_from_snapshot
from genesis_migrator.builder.snapshot import SnapshotInput, SnapshotManager
from genesis_migrator.cli.main import main
from genesis_migrator.protocol.config.params import (
    ADDRESS_LEGACY_RESERVE,
    MigrationConfig,
    NETWORKS,
    ROUND_LENGTH,
    get_network_config,
)
from genesis_migrator.protocol.crypto.addresses import encode_address
from genesis_migrator.protocol.types.common import (
    DataIntegrityError,
    DecodeError,
    MissingRoundDataError,
    UnknownNetworkError,
)
from conftest import encode_legacy_accounts, encode_vote_weights, make_account, make_address

MAINNET = get_network_config("mainnet")
# Falls in round 105 counted from the previous snapshot; weights of round 103 apply
SNAPSHOT_HEIGHT = MAINNET.prev_snapshot_block_height + 105 * ROUND_LENGTH


@pytest.fixture
def snapshot(sample_accounts):
    return SnapshotInput(
        network_identifier=MAINNET.network_identifier,
        height=SNAPSHOT_HEIGHT,
        accounts=sample_accounts,
        legacy_accounts=encode_legacy_accounts([(bytes.fromhex("0102030405060708"), 12345)]),
        vote_weights=encode_vote_weights({
            103: [(make_address("validator_1"), 10), (make_address("validator_2"), 20)],
        }),
    )


def snapshot_json(snapshot: SnapshotInput) -> str:
    """Serializes a snapshot input the way the export tooling writes it (hex bytes)."""
    data = snapshot.model_dump(by_alias=True)

    def to_hex(value):
        if isinstance(value, bytes):
            return value.hex()
        if isinstance(value, list):
            return [to_hex(v) for v in value]
        if isinstance(value, dict):
            return {k: to_hex(v) for k, v in value.items()}
        return value

    return json.dumps(to_hex(data))


def test_network_config_lookup():
    assert get_network_config("testnet").token_id == "0100000000000000"
    assert get_network_config(MAINNET.network_identifier) is MAINNET
    assert len(NETWORKS) == 2
    with pytest.raises(UnknownNetworkError):
        get_network_config("devnet")


def test_build_assets_sorted_by_module(snapshot):
    assets = build_genesis_assets(snapshot)

    assert [entry.module for entry in assets.assets] == ["legacy", "pos", "token"]


def test_build_contents(snapshot):
    assets = build_genesis_assets(snapshot)

    token = assets.get_module("token").data
    pos = assets.get_module("pos").data
    legacy = assets.get_module("legacy").data

    assert token.supply_substore[0].token_id == MAINNET.token_id
    assert token.supply_substore[0].total_supply == str(1000 + 500 + 75 + 200 + 300 + 50)

    reserve = next(e for e in token.user_substore if e.address == encode_address(ADDRESS_LEGACY_RESERVE))
    assert reserve.available_balance == "0"
    assert [(lb.module, lb.amount) for lb in reserve.locked_balances] == [("legacy", "12345")]

    assert len(pos.validators) == 2
    assert pos.genesis_data.init_validators == [
        encode_address(make_address("validator_2")),
        encode_address(make_address("validator_1")),
    ]
    assert [(a.address, a.balance) for a in legacy.accounts] == [("0102030405060708", "12345")]


def test_legacy_entry_matches_module_helper(snapshot):
    assets = build_genesis_assets(snapshot)

    expected = add_legacy_module_entry(decode_legacy_accounts(snapshot.legacy_accounts))
    assert assets.get_module("legacy") == expected


def test_build_is_deterministic(snapshot, sample_accounts):
    first = build_genesis_assets(snapshot)
    shuffled = snapshot.model_copy(update={"accounts": list(reversed(sample_accounts))})
    second = build_genesis_assets(shuffled)

    assert first.canonical_json() == second.canonical_json()
    assert first.calculate_hash() == second.calculate_hash()
    assert len(first.calculate_hash()) == 64


def test_malformed_legacy_blob_aborts(snapshot):
    broken = snapshot.model_copy(update={"legacy_accounts": b"\x0a\xff"})

    with pytest.raises(DecodeError):
        build_genesis_assets(broken)


def test_missing_round_aborts(snapshot):
    broken = snapshot.model_copy(update={
        "vote_weights": encode_vote_weights({50: [(make_address("validator_1"), 1)]}),
    })

    with pytest.raises(MissingRoundDataError):
        build_genesis_assets(broken)


def test_height_mismatch(snapshot):
    config = MigrationConfig(network=MAINNET, snapshot_height=SNAPSHOT_HEIGHT + 1)

    with pytest.raises(DataIntegrityError):
        GenesisAssetsBuilder(config).build(snapshot)


def test_config_from_snapshot(snapshot):
    config = config_from_snapshot(snapshot)

    assert config.network is MAINNET
    assert config.snapshot_height == SNAPSHOT_HEIGHT
    assert config.token_id == MAINNET.token_id


def test_snapshot_input_from_json(snapshot):
    loaded = SnapshotInput.model_validate_json(snapshot_json(snapshot))

    assert loaded == snapshot


def test_manager_roundtrip(snapshot, tmp_path):
    input_path = tmp_path / "snapshot.json.gz"
    with gzip.open(input_path, "wb") as f:
        f.write(snapshot_json(snapshot).encode())

    manager = SnapshotManager(tmp_path / "out")
    loaded = manager.load_input(input_path)
    assets = build_genesis_assets(loaded)
    digest = manager.save_genesis_assets(assets)

    assert digest == build_genesis_assets(snapshot).calculate_hash()
    assert manager.load_genesis_assets() == assets
    assert manager.verify_genesis_assets()


def test_manager_detects_tampering(snapshot, tmp_path):
    manager = SnapshotManager(tmp_path)
    manager.save_genesis_assets(build_genesis_assets(snapshot))

    path = tmp_path / "genesis_assets.json"
    data = json.loads(path.read_text())
    token = next(entry for entry in data["assets"] if entry["module"] == "token")
    token["data"]["supplySubstore"][0]["totalSupply"] = "1"
    path.write_text(json.dumps(data))

    assert not manager.verify_genesis_assets()


def corrupt_first_user_address(path):
    """Changes the last character of one address; its checksum no longer holds."""
    data = json.loads(path.read_text())
    token = next(entry for entry in data["assets"] if entry["module"] == "token")
    address = token["data"]["userSubstore"][0]["address"]
    swapped = "z" if address[-1] != "z" else "x"
    token["data"]["userSubstore"][0]["address"] = address[:-1] + swapped
    path.write_text(json.dumps(data))


def test_manager_rejects_corrupted_address(snapshot, tmp_path):
    manager = SnapshotManager(tmp_path)
    manager.save_genesis_assets(build_genesis_assets(snapshot))
    corrupt_first_user_address(tmp_path / "genesis_assets.json")

    with pytest.raises(PydanticValidationError):
        manager.load_genesis_assets()


def test_manager_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        SnapshotManager(tmp_path).load_input(tmp_path / "absent.json")


def test_cli_build_and_verify(snapshot, tmp_path, capsys):
    input_path = tmp_path / "snapshot.json"
    input_path.write_text(snapshot_json(snapshot))
    out_dir = tmp_path / "out"

    main(["build", "--input", str(input_path), "--output-dir", str(out_dir)])
    output = capsys.readouterr().out

    assert "Genesis Assets Summary" in output
    assert (out_dir / "genesis_assets.json").exists()
    assert build_genesis_assets(snapshot).calculate_hash() in output

    main(["verify", "--output-dir", str(out_dir)])
    assert "match the recorded digest" in capsys.readouterr().out


def test_cli_build_failure_writes_nothing(snapshot, tmp_path):
    broken = snapshot.model_copy(update={"vote_weights": b"\x01"})
    input_path = tmp_path / "snapshot.json"
    input_path.write_text(snapshot_json(broken))
    out_dir = tmp_path / "out"

    with pytest.raises(SystemExit) as exc:
        main(["build", "--input", str(input_path), "--output-dir", str(out_dir)])

    assert exc.value.code == 1
    assert not (out_dir / "genesis_assets.json").exists()


def test_cli_verify_rejects_corrupted_address(snapshot, tmp_path):
    SnapshotManager(tmp_path).save_genesis_assets(build_genesis_assets(snapshot))
    corrupt_first_user_address(tmp_path / "genesis_assets.json")

    with pytest.raises(SystemExit) as exc:
        main(["verify", "--output-dir", str(tmp_path)])

    assert exc.value.code == 1

# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import logging
import sys
from pydantic import ValidationError as PydanticValidationError
from ..builder.genesis import GenesisAssetsBuilder, config_from_snapshot
from ..builder.snapshot import SnapshotManager
from ..protocol.types.common import ProtocolError
from ..protocol.config.params import MODULE_NAME_TOKEN, MODULE_NAME_POS, MODULE_NAME_LEGACY

logger = logging.getLogger(__name__)

def cmd_build(args):
    manager = SnapshotManager(args.output_dir)
    try:
        snapshot = manager.load_input(args.input)
        config = config_from_snapshot(snapshot)
        assets = GenesisAssetsBuilder(config).build(snapshot)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except (ProtocolError, PydanticValidationError) as e:
        logger.error(f"Genesis build aborted: {e}")
        print(f"Error: genesis build aborted, no assets written ({e.__class__.__name__})")
        sys.exit(1)

    digest = manager.save_genesis_assets(assets)

    token = assets.get_module(MODULE_NAME_TOKEN).data
    pos = assets.get_module(MODULE_NAME_POS).data
    legacy = assets.get_module(MODULE_NAME_LEGACY).data

    print(f"\n--- Genesis Assets Summary ---")
    print(f"Network:          {config.network.name}")
    print(f"Snapshot height:  {config.snapshot_height}")
    print(f"Token ID:         {config.token_id}")
    print(f"User balances:    {len(token.user_substore)}")
    print(f"Total supply:     {token.supply_substore[0].total_supply}")
    print(f"Validators:       {len(pos.validators)}")
    print(f"Stakers:          {len(pos.stakers)}")
    print(f"Init validators:  {len(pos.genesis_data.init_validators)}")
    print(f"Legacy accounts:  {len(legacy.accounts)}")
    print(f"SHA256:           {digest}")

def cmd_verify(args):
    manager = SnapshotManager(args.output_dir)
    try:
        ok = manager.verify_genesis_assets()
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except PydanticValidationError as e:
        logger.error(f"Stored genesis assets are malformed: {e}")
        print("Genesis assets are malformed and cannot be verified.")
        sys.exit(1)

    if not ok:
        print("Genesis assets do NOT match the recorded digest.")
        sys.exit(1)
    print("Genesis assets match the recorded digest.")

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="genesis-migrator",
        description="Build deterministic genesis assets from a legacy chain snapshot",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command")

    p_build = sub.add_parser("build", help="Build genesis assets from a snapshot input file")
    p_build.add_argument("--input", "-i", required=True, help="Snapshot input (.json or .json.gz)")
    p_build.add_argument("--output-dir", "-o", default="./data", help="Output directory (default: ./data)")
    p_build.set_defaults(func=cmd_build)

    p_verify = sub.add_parser("verify", help="Verify genesis assets against their recorded digest")
    p_verify.add_argument("--output-dir", "-o", default="./data", help="Output directory (default: ./data)")
    p_verify.set_defaults(func=cmd_verify)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    args.func(args)

if __name__ == "__main__":
    main()

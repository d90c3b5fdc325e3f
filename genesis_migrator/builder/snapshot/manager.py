# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Manager

Handles loading snapshot inputs and saving/verifying genesis assets.
"""

import gzip
import json
import logging
from pathlib import Path
from typing import Union

from .types import SnapshotInput
from ...protocol.types.genesis import GenesisAssets

logger = logging.getLogger(__name__)

GENESIS_ASSETS_FILE = "genesis_assets.json"
GENESIS_ASSETS_HASH_FILE = "genesis_assets.sha256"


class SnapshotManager:
    """
    Reads snapshot inputs and writes genesis assets.

    Layout of the output directory:
    - genesis_assets.json (assets document)
    - genesis_assets.sha256 (digest of the canonical JSON)
    """

    def __init__(self, output_dir: Union[str, Path] = "data"):
        """
        Initialize snapshot manager.

        Args:
            output_dir: Directory for genesis assets (default: "data")
        """
        self.output_dir = Path(output_dir)

    def load_input(self, path: Union[str, Path]) -> SnapshotInput:
        """
        Load a snapshot input file (JSON, gzip-compressed if it ends in .gz).

        Raises:
            FileNotFoundError: If the file doesn't exist
            pydantic.ValidationError: If the content is malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot input {path} not found")

        logger.info(f"Loading snapshot input from {path}...")

        if path.suffix == ".gz":
            with gzip.open(path, 'rb') as f:
                data = f.read()
        else:
            data = path.read_bytes()

        snapshot = SnapshotInput.model_validate_json(data)

        logger.info(
            f"Snapshot input loaded: height {snapshot.height}, "
            f"{len(snapshot.accounts)} accounts"
        )
        return snapshot

    def _assets_path(self) -> Path:
        return self.output_dir / GENESIS_ASSETS_FILE

    def _hash_path(self) -> Path:
        return self.output_dir / GENESIS_ASSETS_HASH_FILE

    def save_genesis_assets(self, assets: GenesisAssets) -> str:
        """
        Write genesis assets and their digest.

        Returns:
            SHA256 hex digest of the canonical JSON
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        digest = assets.calculate_hash()
        with open(self._assets_path(), 'w') as f:
            json.dump(assets.to_dict(), f, indent=2)
            f.write("\n")

        with open(self._hash_path(), 'w') as f:
            f.write(digest + "\n")

        logger.info(f"Genesis assets written to {self._assets_path()} (sha256 {digest})")
        return digest

    def load_genesis_assets(self) -> GenesisAssets:
        path = self._assets_path()
        if not path.exists():
            raise FileNotFoundError(f"Genesis assets {path} not found")

        return GenesisAssets.model_validate_json(path.read_bytes())

    def verify_genesis_assets(self) -> bool:
        """
        Check the stored assets still match their recorded digest.
        """
        if not self._hash_path().exists():
            return False

        expected = self._hash_path().read_text().strip()
        actual = self.load_genesis_assets().calculate_hash()

        if actual != expected:
            logger.warning(f"Genesis assets digest mismatch: expected {expected}, got {actual}")
            return False
        return True

# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis asset builders and the snapshot input/output around them.
"""

from .genesis import GenesisAssetsBuilder, build_genesis_assets, config_from_snapshot

__all__ = ["GenesisAssetsBuilder", "build_genesis_assets", "config_from_snapshot"]

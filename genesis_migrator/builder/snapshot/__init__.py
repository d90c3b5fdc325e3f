# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Input/Output

Loads materialised snapshot inputs and stores the resulting genesis assets.
"""

from .manager import SnapshotManager
from .types import SnapshotInput

__all__ = ["SnapshotManager", "SnapshotInput"]

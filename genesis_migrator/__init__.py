# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis Migrator

Builds deterministic genesis module assets from a frozen legacy chain snapshot.
"""

__version__ = "0.1.0"

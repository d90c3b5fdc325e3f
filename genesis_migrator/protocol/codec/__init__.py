# MIT License
# Copyright (c) 2025 Hashborn

"""
Binary Codec

Schema-driven encoding in the legacy chain's protobuf-compatible wire format.
"""

from .codec import encode, decode
from .schemas import UNREGISTERED_ADDRESSES_SCHEMA, VOTE_WEIGHTS_SCHEMA

__all__ = ["encode", "decode", "UNREGISTERED_ADDRESSES_SCHEMA", "VOTE_WEIGHTS_SCHEMA"]

# MIT License
# Copyright (c) 2025 Hashborn

from enum import Enum

class ModuleName(str, Enum):
    TOKEN = "token"
    POS = "pos"
    LEGACY = "legacy"

class ProtocolError(Exception):
    pass

class ValidationError(ProtocolError):
    pass

class DecodeError(ProtocolError):
    """Raised when bytes do not match the schema they are decoded against."""
    pass

class MissingRoundDataError(ProtocolError):
    """Raised when the vote-weight snapshot has no usable entry for a round."""
    pass

class DataIntegrityError(ProtocolError):
    """Raised when snapshot data violates an invariant valid chain data always holds."""
    pass

class UnknownNetworkError(ProtocolError):
    pass

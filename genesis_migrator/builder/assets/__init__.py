# MIT License
# Copyright (c) 2025 Hashborn

"""
Module Assets

One builder per genesis module: token, pos and legacy.
"""

from .token import add_token_module_entry, get_locked_balances
from .pos import add_pos_module_entry
from .legacy import add_legacy_module_entry, decode_legacy_accounts, decode_vote_weights

__all__ = [
    "add_token_module_entry",
    "get_locked_balances",
    "add_pos_module_entry",
    "add_legacy_module_entry",
    "decode_legacy_accounts",
    "decode_vote_weights",
]

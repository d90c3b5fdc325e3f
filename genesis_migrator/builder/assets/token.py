# MIT License
# Copyright (c) 2025 Hashborn

"""
Token Module Assets

Builds the user balance table and supply table of the token module.

Accounting rules:
- Funds locked in votes or pending unlocks appear as one `pos` locked
  balance on the owning account.
- Every unregistered legacy balance is merged into the legacy reserve
  account as a `legacy` locked balance, together with the reserve's own
  balance. The reserve's availableBalance stays its own balance.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ...protocol.types.account import Account
from ...protocol.types.common import DataIntegrityError
from ...protocol.types.genesis import (
    LockedBalance,
    UserSubstoreEntry,
    SupplySubstoreEntry,
    TokenModuleData,
    TokenAssetEntry,
)
from ...protocol.crypto.addresses import encode_address
from ...protocol.config.params import (
    ADDRESS_LEGACY_RESERVE,
    MODULE_NAME_POS,
    MODULE_NAME_LEGACY,
)
from .legacy import LegacyAccount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserBalance:
    """User substore row before conversion; address and token ID still binary."""
    address: bytes
    token_id: bytes
    available_balance: int
    locked_balances: List[LockedBalance]

    def sort_key(self):
        return (self.address, self.token_id)

    def to_entry(self) -> UserSubstoreEntry:
        return UserSubstoreEntry(
            address=encode_address(self.address),
            token_id=self.token_id.hex(),
            available_balance=str(self.available_balance),
            locked_balances=self.locked_balances,
        )


def get_locked_balances(account: Optional[Account]) -> List[LockedBalance]:
    """
    Sum of an account's sent votes and pending unlocks as locked balances.

    Returns at most one entry, tagged with the pos module. Accounts with
    nothing locked (or no account at all) yield an empty list.
    """
    amount = 0
    if account is not None:
        for vote in account.dpos.sent_votes:
            amount += vote.amount

        for unlocking in account.dpos.unlocking:
            amount += unlocking.amount

    if amount > 0:
        return [LockedBalance(module=MODULE_NAME_POS, amount=str(amount))]
    return []


def _find_account(accounts: Sequence[Account], address: bytes) -> Optional[Account]:
    for account in accounts:
        if account.address == address:
            return account
    return None


def create_legacy_reserve_account(
    accounts: Sequence[Account],
    legacy_accounts: Sequence[LegacyAccount],
    token_id: str,
) -> UserBalance:
    """
    Consolidates the reserve account and all unregistered legacy balances.

    Args:
        accounts: All snapshot accounts
        legacy_accounts: Decoded unregistered legacy accounts
        token_id: Hex token ID

    Returns:
        The reserve's user substore row (binary form)
    """
    reserve_account = _find_account(accounts, ADDRESS_LEGACY_RESERVE)
    own_balance = reserve_account.token.balance if reserve_account else 0

    reserve_amount = own_balance
    for legacy_account in legacy_accounts:
        reserve_amount += legacy_account.balance

    locked_balances = get_locked_balances(reserve_account)
    locked_balances.append(LockedBalance(module=MODULE_NAME_LEGACY, amount=str(reserve_amount)))

    logger.debug(
        f"Legacy reserve: own balance {own_balance}, "
        f"{len(legacy_accounts)} legacy accounts, locked {reserve_amount}"
    )

    return UserBalance(
        address=ADDRESS_LEGACY_RESERVE,
        token_id=bytes.fromhex(token_id),
        available_balance=own_balance,
        locked_balances=locked_balances,
    )


def create_user_substore(
    accounts: Sequence[Account],
    legacy_accounts: Sequence[LegacyAccount],
    token_id: str,
) -> List[UserSubstoreEntry]:
    """
    Builds the user substore, sorted by (address bytes, token ID bytes).

    Raises:
        DataIntegrityError: If an address appears twice in accounts
    """
    token_id_bytes = bytes.fromhex(token_id)
    rows: List[UserBalance] = []
    seen = set()

    for account in accounts:
        if account.address in seen:
            raise DataIntegrityError(f"Duplicate account {account.address.hex()} in snapshot")
        seen.add(account.address)

        if account.address == ADDRESS_LEGACY_RESERVE:
            continue

        rows.append(UserBalance(
            address=account.address,
            token_id=token_id_bytes,
            available_balance=account.token.balance,
            locked_balances=get_locked_balances(account),
        ))

    rows.append(create_legacy_reserve_account(accounts, legacy_accounts, token_id))

    # Sort on binary form, convert afterwards
    rows.sort(key=UserBalance.sort_key)

    logger.info(f"Created user substore with {len(rows)} entries")
    return [row.to_entry() for row in rows]


def create_supply_substore(accounts: Sequence[Account], token_id: str) -> List[SupplySubstoreEntry]:
    """
    Total supply: every account's balance plus every amount it has locked.
    """
    total_supply = 0
    for account in accounts:
        total_supply += account.token.balance
        for locked_balance in get_locked_balances(account):
            total_supply += int(locked_balance.amount)

    logger.info(f"Total supply of token {token_id}: {total_supply}")
    return [SupplySubstoreEntry(token_id=token_id, total_supply=str(total_supply))]


def add_token_module_entry(
    accounts: Sequence[Account],
    legacy_accounts: Sequence[LegacyAccount],
    token_id: str,
) -> TokenAssetEntry:
    data = TokenModuleData(
        user_substore=create_user_substore(accounts, legacy_accounts, token_id),
        supply_substore=create_supply_substore(accounts, token_id),
        escrow_substore=[],
        supported_tokens_substore=[],
    )
    return TokenAssetEntry(data=data)

# MIT License
# Copyright (c) 2025 Hashborn

"""
PoS Module Assets

Builds validators, stakers and the genesis data (initial validator set)
of the pos module from legacy delegate registrations and votes.

Ordering:
- validators and stakers are sorted by binary address
- votes, unlocks and sharing coefficients keep their source order
- initValidators are ranked by vote weight (descending), ties broken by
  binary address (ascending)
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ...protocol.types.account import Account, SharingCoefficient
from ...protocol.types.common import DataIntegrityError, MissingRoundDataError
from ...protocol.types.validator import VoteWeights, DelegateWeight
from ...protocol.types.genesis import (
    SharingCoefficientEntry,
    ValidatorEntry,
    StakeEntry,
    PendingUnlockEntry,
    StakerEntry,
    GenesisData,
    PoSModuleData,
    PoSAssetEntry,
)
from ...protocol.crypto.addresses import address_from_pubkey, encode_address
from ...protocol.crypto.keys import is_valid_public_key
from ...protocol.config.params import (
    DUMMY_PROOF_OF_POSSESSION,
    INVALID_BLS_KEY,
    INVALID_ED25519_KEY,
    MAX_COMMISSION,
    NUMBER_ACTIVE_VALIDATORS,
    POS_INIT_ROUNDS,
    Q96_ZERO,
    ROUND_LENGTH,
)

logger = logging.getLogger(__name__)


def _sharing_coefficients(
    coefficients: Sequence[SharingCoefficient],
    token_id: str,
) -> List[SharingCoefficientEntry]:
    """Carries coefficients over verbatim; none recorded means a zero coefficient for token_id."""
    if not coefficients:
        return [SharingCoefficientEntry(token_id=token_id, coefficient=Q96_ZERO.hex())]
    return [
        SharingCoefficientEntry(token_id=c.token_id.hex(), coefficient=c.coefficient.hex())
        for c in coefficients
    ]


def get_validator_keys(accounts: Sequence[Account], public_keys: Iterable[bytes]) -> Dict[bytes, bytes]:
    """
    Matches public keys seen on chain to registered validators.

    Args:
        accounts: All snapshot accounts
        public_keys: Block generator and transaction sender keys

    Returns:
        Mapping of validator binary address -> generator public key
    """
    validator_addresses = {account.address for account in accounts if account.is_validator}

    validator_keys: Dict[bytes, bytes] = {}
    for public_key in public_keys:
        if not is_valid_public_key(public_key):
            logger.warning(f"Skipping malformed public key {public_key.hex()}")
            continue
        address = address_from_pubkey(public_key)
        if address in validator_addresses:
            validator_keys[address] = public_key

    logger.info(f"Found generator keys for {len(validator_keys)}/{len(validator_addresses)} validators")
    return validator_keys


def create_validators_array_entry(
    account: Account,
    validator_keys: Mapping[bytes, bytes],
    snapshot_height: int,
    token_id: str,
) -> Optional[ValidatorEntry]:
    """Returns None for accounts without a delegate registration."""
    if not account.is_validator:
        return None

    delegate = account.dpos.delegate

    if delegate.generator_key is not None:
        generator_key = delegate.generator_key.hex()
    elif account.address in validator_keys:
        generator_key = validator_keys[account.address].hex()
    else:
        generator_key = INVALID_ED25519_KEY

    last_commission_increase_height = delegate.last_commission_increase_height
    if last_commission_increase_height is None:
        last_commission_increase_height = snapshot_height

    return ValidatorEntry(
        address=encode_address(account.address),
        name=delegate.username,
        bls_key=delegate.bls_key.hex() if delegate.bls_key is not None else INVALID_BLS_KEY,
        proof_of_possession=(
            delegate.proof_of_possession.hex()
            if delegate.proof_of_possession is not None
            else DUMMY_PROOF_OF_POSSESSION
        ),
        generator_key=generator_key,
        # Activity past the snapshot must not leak into genesis
        last_generated_height=min(delegate.last_forged_height, snapshot_height),
        is_banned=delegate.is_banned,
        report_misbehavior_heights=list(delegate.pom_heights),
        consecutive_missed_blocks=delegate.consecutive_missed_blocks,
        last_commission_increase_height=last_commission_increase_height,
        commission=delegate.commission if delegate.commission is not None else MAX_COMMISSION,
        sharing_coefficients=_sharing_coefficients(delegate.sharing_coefficients, token_id),
    )


def create_validators_array(
    accounts: Sequence[Account],
    validator_keys: Mapping[bytes, bytes],
    snapshot_height: int,
    token_id: str,
) -> List[ValidatorEntry]:
    validators = []
    for account in sorted(accounts, key=lambda a: a.address):
        entry = create_validators_array_entry(account, validator_keys, snapshot_height, token_id)
        if entry is not None:
            validators.append(entry)

    logger.info(f"Created {len(validators)} validator entries")
    return validators


def get_stakes(account: Account, token_id: str) -> List[StakeEntry]:
    return [
        StakeEntry(
            validator_address=encode_address(vote.delegate_address),
            amount=str(vote.amount),
            sharing_coefficients=_sharing_coefficients(vote.sharing_coefficients, token_id),
        )
        for vote in account.dpos.sent_votes
    ]


def get_pending_unlocks(account: Account) -> List[PendingUnlockEntry]:
    return [
        PendingUnlockEntry(
            validator_address=encode_address(unlocking.delegate_address),
            amount=str(unlocking.amount),
            unstake_height=unlocking.unvote_height,
        )
        for unlocking in account.dpos.unlocking
    ]


def create_stakers_array_entry(account: Account, token_id: str) -> Optional[StakerEntry]:
    """Returns None for accounts with no votes and nothing unlocking."""
    if not account.is_staker:
        return None

    return StakerEntry(
        address=encode_address(account.address),
        stakes=get_stakes(account, token_id),
        pending_unlocks=get_pending_unlocks(account),
    )


def create_stakers_array(accounts: Sequence[Account], token_id: str) -> List[StakerEntry]:
    stakers = []
    for account in sorted(accounts, key=lambda a: a.address):
        entry = create_stakers_array_entry(account, token_id)
        if entry is not None:
            stakers.append(entry)

    logger.info(f"Created {len(stakers)} staker entries")
    return stakers


def get_vote_weights_round(snapshot_height: int, prev_snapshot_height: int = 0) -> int:
    """
    Round whose vote weights select the validators of the snapshot round.

    The snapshot falls in round r = ceil((height - prev) / ROUND_LENGTH),
    counted from the height the legacy chain started at. Validators of
    round r are chosen from the weights recorded for round r - 2.
    """
    if snapshot_height < prev_snapshot_height:
        raise DataIntegrityError(
            f"Snapshot height {snapshot_height} is below previous snapshot height {prev_snapshot_height}"
        )

    snapshot_round = -(-(snapshot_height - prev_snapshot_height) // ROUND_LENGTH)
    return snapshot_round - 2


def rank_delegates(delegates: Sequence[DelegateWeight]) -> List[DelegateWeight]:
    """Descending vote weight; equal weights in ascending address order."""
    return sorted(delegates, key=lambda d: (-d.vote_weight, d.address))


def create_genesis_data(
    vote_weights: VoteWeights,
    snapshot_height: int,
    prev_snapshot_height: int = 0,
) -> GenesisData:
    """
    Selects the initial validator set.

    Raises:
        MissingRoundDataError: If the snapshot holds no delegates for the round
    """
    round_number = get_vote_weights_round(snapshot_height, prev_snapshot_height)
    round_weights = vote_weights.get_round(round_number)

    if round_weights is None or not round_weights.delegates:
        logger.error(f"No vote weights for round {round_number} (snapshot height {snapshot_height})")
        raise MissingRoundDataError(
            f"Top delegates for round {round_number} unavailable, cannot compute genesis data"
        )

    top_delegates = rank_delegates(round_weights.delegates)[:NUMBER_ACTIVE_VALIDATORS]

    logger.info(f"Selected {len(top_delegates)} init validators from round {round_number}")
    return GenesisData(
        init_rounds=POS_INIT_ROUNDS,
        init_validators=[encode_address(d.address) for d in top_delegates],
    )


def add_pos_module_entry(
    accounts: Sequence[Account],
    vote_weights: VoteWeights,
    validator_keys: Mapping[bytes, bytes],
    snapshot_height: int,
    prev_snapshot_height: int,
    token_id: str,
) -> PoSAssetEntry:
    data = PoSModuleData(
        validators=create_validators_array(accounts, validator_keys, snapshot_height, token_id),
        stakers=create_stakers_array(accounts, token_id),
        genesis_data=create_genesis_data(vote_weights, snapshot_height, prev_snapshot_height),
    )
    return PoSAssetEntry(data=data)

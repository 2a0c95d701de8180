import asyncio
from functools import partial
from typing import Dict, List, Optional, Tuple, Union

import structlog

from radix_utils.clients.gateway import GatewayClientInterface
from radix_utils.models import (
    AggregationLevel,
    FeeFactor,
    LedgerStateVersion,
    NewFeeFactor,
    ResourceCheckResult,
    UnlockingReward,
    UnstakeClaimNFT,
    UnstakeClaimNFTData,
    ValidatorInfo,
    ValidatorVaults,
)
from radix_utils.utils.amounts import BN, add, decimal_sum, is_positive, to_percentage, to_string
from radix_utils.utils.date import calculate_estimated_unlock_date
from radix_utils.utils.misc import chunk_array, retry_gather

logger = structlog.get_logger()

VALIDATOR_ADDRESS_PREFIX = 'validator_'
NON_FUNGIBLE_DATA_BATCH_SIZE = 100  # Gateway limit for /state/non-fungible/data

# Metadata value kinds that render as a single string
SCALAR_METADATA_TYPES = {'String', 'Url', 'GlobalAddress', 'NonFungibleLocalId'}


def _extract_metadata(metadata: dict) -> Dict[str, str]:
    extracted: Dict[str, str] = {}
    for item in (metadata or {}).get('items') or []:
        typed = (item.get('value') or {}).get('typed') or {}
        if typed.get('type') in SCALAR_METADATA_TYPES:
            extracted[item['key']] = typed['value']
    return extracted


def _vault_address(state: dict, field_name: str) -> str:
    vault = state.get(field_name)
    if isinstance(vault, dict):
        return vault.get('entity_address') or ''
    return ''


def _extract_vault_addresses(state: dict) -> ValidatorVaults:
    return ValidatorVaults(
        currently_earned_lsu_vault_address=_vault_address(state, 'locked_owner_stake_unit_vault'),
        owner_unlocking_lsu_vault_address=_vault_address(state, 'pending_owner_stake_unit_unlock_vault'),
        total_staked_xrd_vault_address=_vault_address(state, 'stake_xrd_vault'),
        unstaking_xrd_vault_address=_vault_address(state, 'pending_xrd_withdraw_vault'),
    )


def _extract_vault_balances(entity: dict) -> Dict[str, str]:
    balances: Dict[str, str] = {}
    for resource in (entity.get('fungible_resources') or {}).get('items') or []:
        if resource.get('aggregation_level') != AggregationLevel.VAULT.value:
            continue
        for vault in (resource.get('vaults') or {}).get('items') or []:
            balances[vault['vault_address']] = vault['amount']
    return balances


def _split_pending_withdrawals(pending_withdrawals: List[UnlockingReward],
                               current_epoch: int) -> Tuple[List[UnlockingReward], str, str]:
    """
    Separate withdrawals that are already claimable from those still locked.

    Returns:
        tuple: (still locked withdrawals, unlocked amount, amount still unlocking)
    """
    still_locked = [w for w in pending_withdrawals if w.epoch_unlocked > current_epoch]
    unlocked = [w for w in pending_withdrawals if w.epoch_unlocked <= current_epoch]
    return (
        still_locked,
        to_string(decimal_sum(w.stake_unit_amount for w in unlocked)),
        to_string(decimal_sum(w.stake_unit_amount for w in still_locked)),
    )


def _is_fee_change_request(value) -> bool:
    return (isinstance(value, dict)
            and value.get('new_fee_factor') is not None
            and value.get('epoch_effective') is not None)


def compute_validator_fee_factor(current_fee_factor: str,
                                 new_fee_factor: Optional[Union[NewFeeFactor, dict]],
                                 current_epoch: int) -> FeeFactor:
    """
    Compute the validator fee as a percentage, accounting for a requested change.

    A change whose effective epoch has been reached replaces the current fee.
    A future change is reported in about_to_change together with an alert
    naming the new fee and the estimated date it applies.

    Args:
        current_fee_factor: Fee as a fraction, e.g. '0.05'
        new_fee_factor: Requested change (NewFeeFactor or the raw gateway dict), if any
        current_epoch: Current ledger epoch

    Returns:
        FeeFactor: e.g. current='5.00%'
    """
    current = to_percentage(current_fee_factor)
    if not new_fee_factor:
        return FeeFactor(current=current)

    if isinstance(new_fee_factor, dict):
        new_fee_factor = NewFeeFactor.from_dict(new_fee_factor)

    new_percentage = to_percentage(new_fee_factor.new_fee_factor)
    if new_fee_factor.epoch_effective <= current_epoch:
        return FeeFactor(current=new_percentage)

    estimated_date = calculate_estimated_unlock_date(new_fee_factor.epoch_effective, current_epoch)
    return FeeFactor(
        current=current,
        about_to_change=NewFeeFactor(
            new_fee_factor=new_percentage,
            epoch_effective=new_fee_factor.epoch_effective,
        ),
        alert=f"Fee will be changed to {new_percentage} on {estimated_date}",
    )


async def check_resource_in_users_fungible_assets(users_addresses: List[str],
                                                  fungible_resource_to_check: str,
                                                  gateway: GatewayClientInterface,
                                                  ledger_state: Optional[dict] = None) -> ResourceCheckResult:
    """
    Sum the holdings of one fungible resource across a list of accounts.

    Vault requests for all accounts run concurrently and the batch is retried
    as a whole on failure. If an account holds the resource in more than one
    vault, the per-account map keeps the last positive vault while the total
    includes all of them.

    Returns:
        ResourceCheckResult: Positive holdings keyed by account, and their total
    """
    log = logger.bind(operation="check_resource_in_users_fungible_assets",
                      resource_address=fungible_resource_to_check,
                      account_count=len(users_addresses))
    operations = [
        partial(gateway.get_entity_fungible_resource_vault_page,
                address, fungible_resource_to_check, at_ledger_state=ledger_state)
        for address in users_addresses
    ]
    try:
        responses = await retry_gather(operations)
    except Exception as e:
        log.error("resource_check_failed", error=str(e))
        raise

    users_with_resource_amount: Dict[str, str] = {}
    total_amount = BN(0)
    for response in responses:
        for vault in response.get('items') or []:
            amount = vault.get('amount')
            if amount is not None and is_positive(amount):
                users_with_resource_amount[response['address']] = amount
                total_amount = add(total_amount, amount)

    return ResourceCheckResult(
        users_with_resource_amount=users_with_resource_amount,
        total_amount=to_string(total_amount),
    )


async def fetch_validator_info(gateway: GatewayClientInterface, validator_address: str) -> Optional[ValidatorInfo]:
    """
    Fetch and aggregate a validator's stake, vaults, metadata and fees.

    Returns None when the address is not a validator address, when the entity
    is not a component with state, or when fetching or parsing fails. Failures
    are logged.
    """
    if not validator_address or not validator_address.startswith(VALIDATOR_ADDRESS_PREFIX):
        return None

    log = logger.bind(operation="fetch_validator_info", validator_address=validator_address)
    try:
        res = await gateway.get_entity_details([validator_address], aggregation_level=AggregationLevel.VAULT)

        items = res.get('items') or []
        entity = items[0] if items else {}
        details = entity.get('details') or {}
        state = details.get('state')
        if details.get('type') != 'Component' or not state:
            log.info("validator_not_found")
            return None

        epoch = LedgerStateVersion.from_dict(res['ledger_state']).epoch
        vaults = _extract_vault_addresses(state)
        vaults_balance = _extract_vault_balances(entity)

        unlocking_breakdown: List[UnlockingReward] = []
        unlocked_lsus = BN(0)
        owner_lsus_in_unlocking_process = BN(0)

        if 'pending_owner_stake_unit_withdrawals' in state:
            pending = [UnlockingReward.from_dict(w) for w in state['pending_owner_stake_unit_withdrawals'] or []]
            unlocking_breakdown, unlocked_amount, unlocking_amount = _split_pending_withdrawals(pending, epoch)
            unlocked_lsus = add(unlocked_lsus, unlocked_amount)
            owner_lsus_in_unlocking_process = add(owner_lsus_in_unlocking_process, unlocking_amount)

        if state.get('already_unlocked_owner_stake_unit_amount') is not None:
            unlocked_lsus = add(unlocked_lsus, state['already_unlocked_owner_stake_unit_amount'])

        if 'validator_fee_factor' in state:
            change_request = state.get('validator_fee_change_request')
            fees = compute_validator_fee_factor(
                state['validator_fee_factor'],
                change_request if _is_fee_change_request(change_request) else None,
                epoch,
            )
        else:
            fees = FeeFactor(current='')

        return ValidatorInfo(
            currently_earned_locked_lsus=vaults_balance.get(vaults.currently_earned_lsu_vault_address, '0'),
            owner_lsus_in_unlocking_process=to_string(owner_lsus_in_unlocking_process),
            total_staked_xrds=vaults_balance.get(vaults.total_staked_xrd_vault_address, '0'),
            total_xrds_leaving_our_node=vaults_balance.get(vaults.unstaking_xrd_vault_address, '0'),
            unlocking_lsus_breakdown=unlocking_breakdown,
            epoch=epoch,
            unlocked_lsus=to_string(unlocked_lsus),
            metadata=_extract_metadata(entity.get('metadata')),
            stake_unit_address=state.get('stake_unit_resource_address') or '',
            vaults=vaults,
            validator_address=validator_address,
            fees=fees,
        )
    except Exception as e:
        log.error("validator_info_failed", error=str(e), exc_info=True)
        return None


def _parse_claim_nft(nft: dict) -> Optional[UnstakeClaimNFT]:
    programmatic_json = (nft.get('data') or {}).get('programmatic_json') or {}
    if programmatic_json.get('kind') != 'Tuple':
        return None

    claim_amount = None
    claim_epoch = None
    for field in programmatic_json.get('fields') or []:
        if field.get('kind') == 'Decimal' and field.get('field_name') == 'claim_amount':
            claim_amount = field.get('value')
        elif field.get('kind') == 'U64' and field.get('field_name') == 'claim_epoch':
            if str(field.get('value')).isdigit():
                claim_epoch = int(field['value'])

    return UnstakeClaimNFT(
        nft_id=nft['non_fungible_id'],
        claim_amount=claim_amount,
        claim_epoch=claim_epoch,
    )


async def fetch_unstake_claim_nft_data(gateway: GatewayClientInterface, claim_nft_address: str,
                                       nft_ids: List[str]) -> UnstakeClaimNFTData:
    """
    Fetch claim_amount and claim_epoch of unstake claim NFTs, keyed by NFT id.

    Ids are requested in batches of 100. NFTs whose data is not a tuple are
    left out of the result.

    Args:
        gateway: Gateway client
        claim_nft_address: Address of the claim NFT resource
        nft_ids: Non-fungible ids to fetch

    Returns:
        dict: NFT id -> UnstakeClaimNFT

    Raises:
        Exception: Any gateway error, unchanged
    """
    log = logger.bind(operation="fetch_unstake_claim_nft_data",
                      claim_nft_address=claim_nft_address,
                      nft_count=len(nft_ids))
    try:
        chunk_results = await asyncio.gather(*(
            gateway.get_non_fungible_data(claim_nft_address, chunk)
            for chunk in chunk_array(nft_ids, NON_FUNGIBLE_DATA_BATCH_SIZE)
        ))
    except Exception as e:
        log.error("unstake_claim_fetch_failed", error=str(e))
        raise

    claims: UnstakeClaimNFTData = {}
    for nft in (nft for chunk in chunk_results for nft in chunk):
        claim = _parse_claim_nft(nft)
        if claim is not None:
            claims[claim.nft_id] = claim
    return claims

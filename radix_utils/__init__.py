"""
Radix Gateway utilities.

Fetches validator state, wallet balances, transaction events and unstake
claim NFT data through the Babylon Gateway API and reshapes them into
aggregate structures.
"""

from radix_utils.clients import GatewayAPIClient, GatewayClientInterface
from radix_utils.config import GatewaySettings
from radix_utils.exceptions import (
    EventNotFoundError,
    GatewayRequestError,
    NoEventsError,
    RadixUtilsError,
    TransactionEventError,
)
from radix_utils.models import (
    AggregationLevel,
    FeeFactor,
    FungibleBalance,
    LedgerStateVersion,
    NewFeeFactor,
    NonFungibleBalance,
    ResourceCheckResult,
    UnlockingReward,
    UnstakeClaimNFT,
    UnstakeClaimNFTData,
    ValidatorInfo,
    ValidatorVaults,
    WalletBalances,
)
from radix_utils.utils import (
    BN,
    to_string,
    calculate_estimated_unlock_date,
    chunk_array,
    retry_gather,
    fetch_wallet_balances,
    fetch_all_fungibles,
    fetch_all_non_fungibles,
    get_event_from_transaction,
    get_event_key_values_from_transaction,
    extract_values_from_tx_event,
)
from radix_utils.validators import (
    check_resource_in_users_fungible_assets,
    compute_validator_fee_factor,
    fetch_unstake_claim_nft_data,
    fetch_validator_info,
)

__all__ = [
    'GatewayAPIClient',
    'GatewayClientInterface',
    'GatewaySettings',
    'RadixUtilsError',
    'GatewayRequestError',
    'TransactionEventError',
    'NoEventsError',
    'EventNotFoundError',
    'AggregationLevel',
    'FeeFactor',
    'FungibleBalance',
    'LedgerStateVersion',
    'NewFeeFactor',
    'NonFungibleBalance',
    'ResourceCheckResult',
    'UnlockingReward',
    'UnstakeClaimNFT',
    'UnstakeClaimNFTData',
    'ValidatorInfo',
    'ValidatorVaults',
    'WalletBalances',
    'BN',
    'to_string',
    'calculate_estimated_unlock_date',
    'chunk_array',
    'retry_gather',
    'fetch_wallet_balances',
    'fetch_all_fungibles',
    'fetch_all_non_fungibles',
    'get_event_from_transaction',
    'get_event_key_values_from_transaction',
    'extract_values_from_tx_event',
    'check_resource_in_users_fungible_assets',
    'compute_validator_fee_factor',
    'fetch_unstake_claim_nft_data',
    'fetch_validator_info',
]

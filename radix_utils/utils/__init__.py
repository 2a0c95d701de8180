from radix_utils.utils.amounts import BN, to_string
from radix_utils.utils.date import calculate_estimated_unlock_date
from radix_utils.utils.misc import chunk_array, retry_gather
from radix_utils.utils.wallet import fetch_wallet_balances, fetch_all_fungibles, fetch_all_non_fungibles
from radix_utils.utils.transaction import (
    get_event_from_transaction,
    get_event_key_values_from_transaction,
    extract_values_from_tx_event,
)

__all__ = [
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
]

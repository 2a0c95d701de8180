import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

import structlog

from radix_utils.clients.gateway import GatewayClientInterface
from radix_utils.models import AggregationLevel, FungibleBalance, NonFungibleBalance, WalletBalances
from radix_utils.utils.amounts import is_positive

logger = structlog.get_logger()

PageFetcher = Callable[[Optional[str], Optional[dict]], Awaitable[dict]]


async def _collect_pages(fetch_page: PageFetcher, ledger_state: Optional[dict]) -> List[dict]:
    """
    Follow next_cursor until the last page, accumulating items in order.

    Without an explicit ledger_state, later pages are pinned to the
    state_version of the first response so every page reads the same snapshot.
    """
    items: List[dict] = []
    cursor = None
    while True:
        response = await fetch_page(cursor, ledger_state)
        items.extend(response.get('items') or [])

        if ledger_state is None:
            ledger_state = {'state_version': response['ledger_state']['state_version']}

        cursor = response.get('next_cursor')
        if not cursor:
            return items


async def fetch_all_fungibles(gateway: GatewayClientInterface, address: str,
                              ledger_state: Optional[dict] = None) -> List[dict]:
    """Fetch every fungible resource item of an entity at Global aggregation."""
    async def fetch_page(cursor, at_ledger_state):
        return await gateway.get_entity_fungibles_page(
            address,
            cursor=cursor,
            aggregation_level=AggregationLevel.GLOBAL,
            at_ledger_state=at_ledger_state,
        )

    return await _collect_pages(fetch_page, ledger_state)


async def fetch_all_non_fungibles(gateway: GatewayClientInterface, address: str,
                                  ledger_state: Optional[dict] = None) -> List[dict]:
    """Fetch every non-fungible resource item of an entity at Vault aggregation, with NFT ids."""
    async def fetch_page(cursor, at_ledger_state):
        return await gateway.get_entity_non_fungibles_page(
            address,
            cursor=cursor,
            aggregation_level=AggregationLevel.VAULT,
            include_nfids=True,
            at_ledger_state=at_ledger_state,
        )

    return await _collect_pages(fetch_page, ledger_state)


def _format_fungibles(items: List[dict]) -> Dict[str, FungibleBalance]:
    balances: Dict[str, FungibleBalance] = {}
    for item in items:
        if item.get('aggregation_level') != AggregationLevel.GLOBAL.value:
            continue
        amount = item.get('amount')
        if amount is None or not is_positive(amount):
            continue
        balances[item['resource_address']] = FungibleBalance(
            token_address=item['resource_address'],
            amount=amount,
        )
    return balances


def _format_non_fungibles(items: List[dict]) -> Dict[str, NonFungibleBalance]:
    balances: Dict[str, NonFungibleBalance] = {}
    for item in items:
        if item.get('aggregation_level') != AggregationLevel.VAULT.value or 'vaults' not in item:
            continue
        vaults = (item.get('vaults') or {}).get('items') or []
        # Only the first vault's ids are reported
        ids = list(vaults[0].get('items') or []) if vaults else []
        if not ids:
            continue
        balances[item['resource_address']] = NonFungibleBalance(
            collection_address=item['resource_address'],
            ids=ids,
        )
    return balances


async def fetch_wallet_balances(gateway: GatewayClientInterface, address: str,
                                ledger_state: Optional[dict] = None) -> WalletBalances:
    """
    Fetch the positive fungible balances and non-empty NFT collections of an account.

    Args:
        gateway: Gateway client
        address: Account address
        ledger_state: Optional ledger state selector, e.g. {'state_version': 123}

    Returns:
        WalletBalances: Both maps keyed by resource address

    Raises:
        Exception: Any gateway error, unchanged
    """
    log = logger.bind(operation="fetch_wallet_balances", address=address)
    log.debug("fetching_wallet_balances")
    try:
        fungibles, non_fungibles = await asyncio.gather(
            fetch_all_fungibles(gateway, address, ledger_state),
            fetch_all_non_fungibles(gateway, address, ledger_state),
        )
    except Exception as e:
        log.error("fetch_wallet_balances_failed", error=str(e))
        raise

    return WalletBalances(
        fungible=_format_fungibles(fungibles),
        non_fungible=_format_non_fungibles(non_fungibles),
    )

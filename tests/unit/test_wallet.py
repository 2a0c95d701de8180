import pytest

from radix_utils.models import AggregationLevel, FungibleBalance, NonFungibleBalance, WalletBalances
from radix_utils.utils.wallet import fetch_all_fungibles, fetch_all_non_fungibles, fetch_wallet_balances
from tests.fixtures import mock_gateway, TEST_ACCOUNT_ADDRESS, TEST_STATE_VERSION
from tests.fixtures.mock_data import fungible_item, non_fungible_item, page


@pytest.mark.asyncio
async def test_pagination_follows_cursors_and_pins_state_version(mock_gateway):
    mock_gateway.get_entity_fungibles_page.side_effect = [
        page([fungible_item('resource_a', '1')], next_cursor='c1'),
        page([fungible_item('resource_b', '2')], next_cursor='c2'),
        page([fungible_item('resource_c', '3')], next_cursor=None),
    ]

    items = await fetch_all_fungibles(mock_gateway, TEST_ACCOUNT_ADDRESS)

    assert [item['resource_address'] for item in items] == ['resource_a', 'resource_b', 'resource_c']
    assert mock_gateway.get_entity_fungibles_page.await_count == 3

    calls = mock_gateway.get_entity_fungibles_page.await_args_list
    assert [c.kwargs['cursor'] for c in calls] == [None, 'c1', 'c2']
    assert calls[0].kwargs['at_ledger_state'] is None
    assert calls[1].kwargs['at_ledger_state'] == {'state_version': TEST_STATE_VERSION}
    assert calls[2].kwargs['at_ledger_state'] == {'state_version': TEST_STATE_VERSION}
    assert all(c.kwargs['aggregation_level'] == AggregationLevel.GLOBAL for c in calls)


@pytest.mark.asyncio
async def test_pagination_keeps_explicit_ledger_state(mock_gateway):
    selector = {'state_version': 999}
    mock_gateway.get_entity_non_fungibles_page.side_effect = [
        page([non_fungible_item('nft_a', ['#1#'])], next_cursor='c1', state_version=999),
        page([non_fungible_item('nft_b', ['#2#'])], next_cursor=None, state_version=999),
    ]

    items = await fetch_all_non_fungibles(mock_gateway, TEST_ACCOUNT_ADDRESS, ledger_state=selector)

    assert len(items) == 2
    for c in mock_gateway.get_entity_non_fungibles_page.await_args_list:
        assert c.kwargs['at_ledger_state'] == selector
        assert c.kwargs['aggregation_level'] == AggregationLevel.VAULT
        assert c.kwargs['include_nfids'] is True


@pytest.mark.asyncio
async def test_pagination_propagates_page_failure(mock_gateway):
    mock_gateway.get_entity_fungibles_page.side_effect = [
        page([fungible_item('resource_a', '1')], next_cursor='c1'),
        RuntimeError("Gateway API Error"),
    ]

    with pytest.raises(RuntimeError, match="Gateway API Error"):
        await fetch_all_fungibles(mock_gateway, TEST_ACCOUNT_ADDRESS)


@pytest.mark.asyncio
async def test_fetch_wallet_balances_formats_and_filters(mock_gateway):
    mock_gateway.get_entity_fungibles_page.return_value = page([
        fungible_item('resource_rdx123...', '1000.5'),
        fungible_item('resource_rdx456...', '0'),
    ])
    mock_gateway.get_entity_non_fungibles_page.return_value = page([
        non_fungible_item('nft_rdx789...', ['#1#', '#2#', '#3#']),
        non_fungible_item('nft_rdx000...', []),
    ])

    result = await fetch_wallet_balances(mock_gateway, TEST_ACCOUNT_ADDRESS)

    assert result == WalletBalances(
        fungible={
            'resource_rdx123...': FungibleBalance(token_address='resource_rdx123...', amount='1000.5'),
        },
        non_fungible={
            'nft_rdx789...': NonFungibleBalance(collection_address='nft_rdx789...', ids=['#1#', '#2#', '#3#']),
        },
    )
    assert result.to_dict() == {
        'fungible': {'resource_rdx123...': {'tokenAddress': 'resource_rdx123...', 'amount': '1000.5'}},
        'nonFungible': {'nft_rdx789...': {'collectionAddress': 'nft_rdx789...', 'ids': ['#1#', '#2#', '#3#']}},
    }


@pytest.mark.asyncio
async def test_fetch_wallet_balances_ignores_other_aggregation_levels(mock_gateway):
    vault_level_fungible = dict(fungible_item('resource_vault', '5'), aggregation_level='Vault')
    global_level_nft = {'aggregation_level': 'Global', 'resource_address': 'nft_global', 'amount': '3'}
    mock_gateway.get_entity_fungibles_page.return_value = page([vault_level_fungible])
    mock_gateway.get_entity_non_fungibles_page.return_value = page([global_level_nft])

    result = await fetch_wallet_balances(mock_gateway, TEST_ACCOUNT_ADDRESS)

    assert result == WalletBalances()


@pytest.mark.asyncio
async def test_fetch_wallet_balances_empty(mock_gateway):
    mock_gateway.get_entity_fungibles_page.return_value = page([])
    mock_gateway.get_entity_non_fungibles_page.return_value = page([])

    result = await fetch_wallet_balances(mock_gateway, TEST_ACCOUNT_ADDRESS)

    assert result.fungible == {}
    assert result.non_fungible == {}


@pytest.mark.asyncio
async def test_fetch_wallet_balances_propagates_api_errors(mock_gateway):
    mock_gateway.get_entity_fungibles_page.side_effect = RuntimeError("Gateway API Error")
    mock_gateway.get_entity_non_fungibles_page.return_value = page([])

    with pytest.raises(RuntimeError, match="Gateway API Error"):
        await fetch_wallet_balances(mock_gateway, TEST_ACCOUNT_ADDRESS)

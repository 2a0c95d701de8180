"""
Gateway clients for reading Radix ledger state.
All clients implement the GatewayClientInterface for easy swapping.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import aiohttp
import backoff
import structlog

from radix_utils.config import GatewaySettings
from radix_utils.exceptions import GatewayRequestError
from radix_utils.models import AggregationLevel

logger = structlog.get_logger()


def _is_permanent_failure(e: Exception) -> bool:
    """Only rate limits, server errors and connection problems are worth retrying."""
    if isinstance(e, aiohttp.ClientResponseError):
        return e.status != 429 and e.status < 500
    return False


class GatewayClientInterface(ABC):
    """Interface for the Gateway API queries radix_utils depends on."""

    @abstractmethod
    async def get_entity_details(self, addresses: List[str],
                                 aggregation_level: AggregationLevel = AggregationLevel.VAULT,
                                 at_ledger_state: Optional[dict] = None) -> dict:
        """
        Fetch entity details (metadata, resources, component state).

        Returns:
            dict: Response with `items` and `ledger_state`
        """
        pass

    @abstractmethod
    async def get_entity_fungibles_page(self, address: str, cursor: Optional[str] = None,
                                        aggregation_level: AggregationLevel = AggregationLevel.GLOBAL,
                                        at_ledger_state: Optional[dict] = None) -> dict:
        """
        Fetch one page of fungible resources held by an entity.

        Returns:
            dict: Page with `items`, `next_cursor` and `ledger_state`
        """
        pass

    @abstractmethod
    async def get_entity_non_fungibles_page(self, address: str, cursor: Optional[str] = None,
                                            aggregation_level: AggregationLevel = AggregationLevel.VAULT,
                                            include_nfids: bool = True,
                                            at_ledger_state: Optional[dict] = None) -> dict:
        """
        Fetch one page of non-fungible resources held by an entity.

        Returns:
            dict: Page with `items`, `next_cursor` and `ledger_state`
        """
        pass

    @abstractmethod
    async def get_entity_fungible_resource_vault_page(self, address: str, resource_address: str,
                                                      at_ledger_state: Optional[dict] = None) -> dict:
        """
        Fetch the vaults an entity holds for one fungible resource.

        Returns:
            dict: Page with `address` and `items` (each with `vault_address` and `amount`)
        """
        pass

    @abstractmethod
    async def get_non_fungible_data(self, resource_address: str, non_fungible_ids: List[str]) -> List[dict]:
        """
        Fetch data for a batch of non-fungible ids of one resource.

        Returns:
            list: Items with `non_fungible_id` and `data.programmatic_json`
        """
        pass

    @abstractmethod
    async def get_transaction_committed_details(self, intent_hash: str, detailed_events: bool = True) -> dict:
        """
        Fetch a committed transaction's details.

        Returns:
            dict: Response with `transaction.receipt`
        """
        pass


class GatewayAPIClient(GatewayClientInterface):
    """Async client for the Radix Babylon Gateway API."""

    def __init__(self, settings: Optional[GatewaySettings] = None):
        self.config = settings or GatewaySettings()
        if not self.config.base_url:
            raise ValueError("RADIX_GATEWAY_URL is required, e.g. https://mainnet.radixdlt.com")
        self.base_url = self.config.base_url.rstrip('/')
        self.headers = {
            "Content-Type": "application/json",
            "RDX-App-Name": self.config.application_name,
            "RDX-App-Version": self.config.application_version,
        }
        if self.config.dapp_definition:
            self.headers["RDX-App-Dapp-Definition"] = self.config.dapp_definition
        self.timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        self.logger = logger.bind(component="gateway_client")

    @property
    def name(self):
        return "Radix Gateway API"

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError),
        max_tries=3,
        giveup=_is_permanent_failure,
        factor=2
    )
    async def _request(self, path: str, payload: dict) -> Any:
        async with aiohttp.ClientSession(timeout=self.timeout, headers=self.headers) as session:
            async with session.post(f"{self.base_url}{path}", json=payload) as response:
                response.raise_for_status()
                return await response.json()

    async def _post(self, path: str, payload: dict) -> Any:
        """POST to a gateway endpoint and return the decoded JSON body."""
        try:
            return await self._request(path, payload)
        except aiohttp.ClientResponseError as e:
            self.logger.error("gateway_http_error", path=path, status=e.status, error=e.message)
            raise GatewayRequestError(f"Gateway API error {e.status} on {path}: {e.message}",
                                      path=path, status=e.status) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error("gateway_connection_error", path=path, error=str(e))
            raise GatewayRequestError(f"Gateway API request to {path} failed: {e}", path=path) from e

    async def get_entity_details(self, addresses: List[str],
                                 aggregation_level: AggregationLevel = AggregationLevel.VAULT,
                                 at_ledger_state: Optional[dict] = None) -> dict:
        payload: Dict[str, Any] = {
            "addresses": list(addresses),
            "aggregation_level": aggregation_level.value,
        }
        if at_ledger_state:
            payload["at_ledger_state"] = at_ledger_state
        return await self._post("/state/entity/details", payload)

    async def get_entity_fungibles_page(self, address: str, cursor: Optional[str] = None,
                                        aggregation_level: AggregationLevel = AggregationLevel.GLOBAL,
                                        at_ledger_state: Optional[dict] = None) -> dict:
        payload: Dict[str, Any] = {
            "address": address,
            "aggregation_level": aggregation_level.value,
        }
        if cursor:
            payload["cursor"] = cursor
        if at_ledger_state:
            payload["at_ledger_state"] = at_ledger_state
        return await self._post("/state/entity/page/fungibles/", payload)

    async def get_entity_non_fungibles_page(self, address: str, cursor: Optional[str] = None,
                                            aggregation_level: AggregationLevel = AggregationLevel.VAULT,
                                            include_nfids: bool = True,
                                            at_ledger_state: Optional[dict] = None) -> dict:
        payload: Dict[str, Any] = {
            "address": address,
            "aggregation_level": aggregation_level.value,
            "opt_ins": {"non_fungible_include_nfids": include_nfids},
        }
        if cursor:
            payload["cursor"] = cursor
        if at_ledger_state:
            payload["at_ledger_state"] = at_ledger_state
        return await self._post("/state/entity/page/non-fungibles/", payload)

    async def get_entity_fungible_resource_vault_page(self, address: str, resource_address: str,
                                                      at_ledger_state: Optional[dict] = None) -> dict:
        payload: Dict[str, Any] = {
            "address": address,
            "resource_address": resource_address,
        }
        if at_ledger_state:
            payload["at_ledger_state"] = at_ledger_state
        return await self._post("/state/entity/page/fungible-vaults/", payload)

    async def get_non_fungible_data(self, resource_address: str, non_fungible_ids: List[str]) -> List[dict]:
        data = await self._post("/state/non-fungible/data", {
            "resource_address": resource_address,
            "non_fungible_ids": list(non_fungible_ids),
        })
        return data.get('non_fungible_ids') or []

    async def get_transaction_committed_details(self, intent_hash: str, detailed_events: bool = True) -> dict:
        return await self._post("/transaction/committed-details", {
            "intent_hash": intent_hash,
            "opt_ins": {"detailed_events": detailed_events},
        })

from typing import Any, Dict

from radix_utils.clients.gateway import GatewayClientInterface
from radix_utils.exceptions import EventNotFoundError, NoEventsError


async def get_event_from_transaction(gateway: GatewayClientInterface, tx_id: str, event_name: str) -> dict:
    """
    Fetch a committed transaction and return the first detailed event with the given name.

    Raises:
        NoEventsError: The receipt has no detailed events
        EventNotFoundError: No event carries that name
    """
    details = await gateway.get_transaction_committed_details(tx_id, detailed_events=True)
    receipt = (details.get('transaction') or {}).get('receipt') or {}
    events = receipt.get('detailed_events')
    if events is None:
        raise NoEventsError("No events found in transaction receipt")

    for event in events:
        if (event.get('identifier') or {}).get('event') == event_name:
            return event
    raise EventNotFoundError(event_name)


def extract_values_from_tx_event(event: dict) -> Dict[str, Any]:
    """
    Map field_name -> value over the event's programmatic payload fields.

    Scalar fields carry their value as a string. Composite fields such as tuples
    have no top-level value and map to None.
    """
    fields = ((event.get('payload') or {}).get('programmatic_json') or {}).get('fields')
    if not fields:
        return {}
    return {f['field_name']: f.get('value') for f in fields if 'field_name' in f}


async def get_event_key_values_from_transaction(gateway: GatewayClientInterface, tx_id: str,
                                                event_name: str) -> Dict[str, Any]:
    event = await get_event_from_transaction(gateway, tx_id, event_name)
    return extract_values_from_tx_event(event)

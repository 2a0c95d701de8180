from radix_utils.clients.gateway import GatewayClientInterface, GatewayAPIClient

__all__ = ['GatewayClientInterface', 'GatewayAPIClient']

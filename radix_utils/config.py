from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class GatewaySettings(BaseSettings):
    """Radix Babylon Gateway API configuration."""
    
    base_url: str = Field(
        "https://mainnet.radixdlt.com",
        alias="RADIX_GATEWAY_URL",
        description="Gateway API base URL (use https://stokenet.radixdlt.com for testnet)"
    )
    application_name: str = Field(
        "radix-utils",
        alias="RADIX_APPLICATION_NAME",
        description="Sent as RDX-App-Name so the gateway operator can identify traffic"
    )
    application_version: str = Field(
        "1.0.0",
        alias="RADIX_APPLICATION_VERSION",
        description="Sent as RDX-App-Version"
    )
    dapp_definition: Optional[str] = Field(
        None,
        alias="RADIX_DAPP_DEFINITION",
        description="Optional dApp definition address sent as RDX-App-Dapp-Definition"
    )
    timeout_seconds: float = Field(
        30,
        alias="RADIX_GATEWAY_TIMEOUT",
        description="Total timeout for a single gateway request"
    )

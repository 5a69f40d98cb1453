"""
Configuration loaded from environment variables. Fail-fast on invalid values.
"""

from pydantic_settings import BaseSettings
from pydantic import Field

from economics.chains import DEFAULT_SIMPLE_ROUTING_CHAIN_IDS


class Config(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "frozen": True, "extra": "ignore"}

    # Chain access
    rpc_url: str = "https://polygon-rpc.com"
    chain_id: int = Field(default=137, gt=0)  # Polygon mainnet
    # Offline by default: oracle/quoter/min-return fall back to unknown
    allow_network: bool = False

    # Chains whose orders settle through the relayer (no client-side fee math).
    # Env: SIMPLE_ROUTING_CHAIN_IDS='[1, 5]'
    simple_routing_chain_ids: list[int] = Field(
        default_factory=lambda: sorted(DEFAULT_SIMPLE_ROUTING_CHAIN_IDS),
    )

    # Gas estimation
    execution_gas_limit: int = Field(default=400_000, gt=0)
    gas_cache_sec: float = Field(default=10.0, ge=0)
    # Serve the last good sample this long after the RPC starts failing
    gas_max_stale_sec: float = Field(default=60.0, ge=0)
    # Used when the network is off or the RPC has never answered. None = unknown.
    default_gas_gwei: float | None = Field(default=None, ge=0)

    # Range-order library constants (basis points)
    slippage_bps: int = Field(default=40, ge=0, le=10_000)
    fee_bps: int = Field(default=2, ge=0, le=10_000)
    range_order_address: str = ""
    query_min_return: bool = True
    min_return_timeout_sec: float = Field(default=5.0, gt=0)

    # Native price quotes
    coingecko_host: str = "https://api.coingecko.com/api/v3"
    price_cache_sec: float = Field(default=30.0, ge=0)

    log_level: str = "INFO"


def load_config() -> Config:
    """Load and validate config from environment. Raises on invalid fields."""
    return Config()

"""Application configuration using pydantic-settings.

Endpoint lists, probe/call timeouts and the connection cache TTL are all
overridable from the environment (or a local .env file). Lists are given as
JSON, e.g. ``ETH_RPC_URLS='["https://rpc.example"]'``.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Wallet engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Public RPC endpoints (ordered, first entry is the fallback)
    # ======================
    eth_rpc_urls: list[str] = Field(
        default=[
            "https://eth.publicnode.com",
            "https://eth-mainnet.public.blastapi.io",
            "https://1rpc.io/eth",
        ],
        description="Ethereum JSON-RPC endpoints",
    )
    bsc_rpc_urls: list[str] = Field(
        default=[
            "https://bsc.publicnode.com",
            "https://bsc-mainnet.public.blastapi.io",
            "https://1rpc.io/bsc",
        ],
        description="BNB Smart Chain JSON-RPC endpoints",
    )
    sol_rpc_urls: list[str] = Field(
        default=[
            "https://api.mainnet-beta.solana.com",
            "https://lb.drpc.live/solana/AsI-wCxldUISpGcRLIzZ1ZTm73-y0MsR8K7dOmy9-kY5",
        ],
        description="Solana JSON-RPC endpoints",
    )

    # ======================
    # Timeouts / caching
    # ======================
    rpc_probe_timeout: float = Field(
        default=7.0, description="Per-endpoint liveness probe timeout in seconds"
    )
    rpc_call_timeout: float = Field(
        default=20.0, description="Timeout for balance and broadcast calls in seconds"
    )
    connection_ttl: float = Field(
        default=30.0, description="Seconds a raced connection stays cached"
    )

    # ======================
    # Solana
    # ======================
    sol_commitment: str = Field(default="confirmed", description="Solana commitment level")
    spl_token_decimals: int = Field(
        default=6, description="Decimals assumed for the Solana stablecoin mints"
    )
    sol_native_precision: int = Field(
        default=6, description="Decimal places kept when reporting SOL balances"
    )

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @field_validator("eth_rpc_urls", "bsc_rpc_urls", "sol_rpc_urls")
    @classmethod
    def _require_endpoints(cls, value: list[str]) -> list[str]:
        urls = [url.strip() for url in value if url and url.strip()]
        if not urls:
            raise ValueError("at least one RPC endpoint is required")
        for url in urls:
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"RPC endpoint must be an http(s) URL: {url}")
        return urls

    def get_rpc_urls(self, network: str) -> list[str]:
        """Get the ordered endpoint list for a network key (eth, bsc, sol)."""
        rpc_map = {
            "eth": self.eth_rpc_urls,
            "bsc": self.bsc_rpc_urls,
            "sol": self.sol_rpc_urls,
        }
        try:
            return list(rpc_map[network.lower()])
        except KeyError:
            raise ValueError(f"Unknown network: {network}") from None

    def get_safe_dict(self) -> dict:
        """Return settings as a plain dict (nothing here is secret)."""
        return {
            "debug": self.debug,
            "rpc": {
                "eth": self.eth_rpc_urls,
                "bsc": self.bsc_rpc_urls,
                "sol": self.sol_rpc_urls,
            },
            "timeouts": {
                "probe": self.rpc_probe_timeout,
                "call": self.rpc_call_timeout,
                "connection_ttl": self.connection_ttl,
            },
            "solana": {
                "commitment": self.sol_commitment,
                "spl_token_decimals": self.spl_token_decimals,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

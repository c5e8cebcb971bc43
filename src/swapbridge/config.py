"""Application configuration using pydantic-settings.

Credentials are read here once and passed into the engine as an explicit
Credentials value; nothing below this module reads the environment.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from swapbridge.wallet.base import Credentials


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Bridge Aggregator
    # ======================
    rubic_api_url: str = Field(
        default="https://api-v2.rubic.exchange/api", description="Rubic API base URL"
    )
    http_timeout: float = Field(
        default=30.0, gt=0, description="Lower bound for HTTP timeouts in seconds"
    )
    default_slippage_pct: float = Field(
        default=1.0, ge=0.01, le=50, description="Default slippage tolerance in percent"
    )
    default_quote_timeout: int = Field(
        default=30, ge=5, le=60, description="Default route calculation timeout in seconds"
    )

    # ======================
    # Wallet
    # ======================
    eth_wallet_address: Optional[str] = Field(default=None, description="EVM public address")
    eth_private_key: Optional[str] = Field(default=None, description="EVM private key (hex)")
    solana_wallet_address: Optional[str] = Field(default=None, description="Solana public address")
    solana_private_key: Optional[str] = Field(
        default=None, description="Solana secret key (base58, JSON array or hex)"
    )
    utxo_wallet_address: Optional[str] = Field(
        default=None, description="Address used as sender on UTXO chains"
    )
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="BIP39 seed phrase used when no key is configured"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_credentials(self) -> Credentials:
        """Build the explicit credentials value handed to the engine."""
        return Credentials(
            evm_address=self.eth_wallet_address or None,
            evm_private_key=self.eth_private_key or None,
            solana_address=self.solana_wallet_address or None,
            solana_private_key=self.solana_private_key or None,
            utxo_address=self.utxo_wallet_address or None,
            seed_phrase=self.wallet_seed_phrase or None,
        )

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "aggregator": {
                "url": self.rubic_api_url,
                "http_timeout": self.http_timeout,
                "default_slippage_pct": self.default_slippage_pct,
                "default_quote_timeout": self.default_quote_timeout,
            },
            "wallet": {
                "evm_address": self.eth_wallet_address or "(not set)",
                "evm_private_key": "***" if self.eth_private_key else "(not set)",
                "solana_address": self.solana_wallet_address or "(not set)",
                "solana_private_key": "***" if self.solana_private_key else "(not set)",
                "utxo_address": self.utxo_wallet_address or "(not set)",
                "seed_phrase": "***" if self.wallet_seed_phrase else "(not set)",
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

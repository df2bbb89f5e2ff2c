"""
Environment-based configuration for the template forge contract.

Settings are read from environment variables, optionally seeded from a .env
file at the project root.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)
    logger.info("Loaded environment variables", env_file=str(env_file))


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, "").lower()
    return value in ("true", "1", "yes", "on") if value else default


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer value from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float value from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


@dataclass
class ContractSettings:
    """Contract settings from environment variables."""

    # Environment
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))

    # Accounts
    contract_address: str = field(default_factory=lambda: os.getenv("CONTRACT_ADDRESS", "template-forge"))
    owner_address: str = field(default_factory=lambda: os.getenv("OWNER_ADDRESS", "owner"))
    operator_address: Optional[str] = field(default_factory=lambda: os.getenv("OPERATOR_ADDRESS"))

    # Token and economics
    template_token_id: Optional[str] = field(default_factory=lambda: os.getenv("TEMPLATE_TOKEN_ID"))
    daily_generation_limit: int = field(default_factory=lambda: get_env_int("DAILY_GENERATION_LIMIT", 3))
    nft_minting_fee: int = field(default_factory=lambda: get_env_int("NFT_MINTING_FEE", 50_000_000_000_000_000))
    platform_fee_bps: int = field(default_factory=lambda: get_env_int("PLATFORM_FEE_BPS", 250))
    template_royalties_bps: int = field(default_factory=lambda: get_env_int("TEMPLATE_ROYALTIES_BPS", 250))

    # Off-ledger worker
    event_polling_interval: float = field(default_factory=lambda: get_env_float("EVENT_POLLING_INTERVAL", 6.0))

    # Logging Configuration
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json_format: bool = field(default_factory=lambda: get_env_bool("LOG_JSON_FORMAT", False))

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not 0 <= self.platform_fee_bps <= 10_000:
            logger.warning("Platform fee out of range, using default", platform_fee_bps=self.platform_fee_bps)
            self.platform_fee_bps = 250
        if not 0 <= self.template_royalties_bps <= 10_000:
            logger.warning("Royalties out of range, using default", royalties_bps=self.template_royalties_bps)
            self.template_royalties_bps = 250
        if self.daily_generation_limit < 0:
            logger.warning("Negative daily limit, using default", daily_limit=self.daily_generation_limit)
            self.daily_generation_limit = 3
        if self.nft_minting_fee < 0:
            logger.warning("Negative minting fee, using default", mint_fee=self.nft_minting_fee)
            self.nft_minting_fee = 50_000_000_000_000_000
        if self.event_polling_interval <= 0:
            self.event_polling_interval = 6.0

        if self.environment == "production":
            if not self.template_token_id:
                logger.warning("No template token identifier configured for production environment")
            if not self.operator_address:
                logger.warning("Operator defaults to the owner account in production environment")

    def get_contract_config(self) -> dict:
        """Get contract constructor arguments as a dictionary."""
        return {
            "owner": self.owner_address,
            "address": self.contract_address,
            "operator": self.operator_address,
            "template_token_id": self.template_token_id,
            "daily_limit": self.daily_generation_limit,
            "mint_fee": self.nft_minting_fee,
            "platform_fee_bps": self.platform_fee_bps,
            "royalties_bps": self.template_royalties_bps,
        }


# Global settings instance
_settings: Optional[ContractSettings] = None


def get_settings() -> ContractSettings:
    """Get the global contract settings instance."""
    global _settings
    if _settings is None:
        _settings = ContractSettings()
        logger.info("Loaded settings", environment=_settings.environment)
    return _settings


def reload_settings() -> ContractSettings:
    """Reload the global contract settings."""
    global _settings
    if env_file.exists():
        load_dotenv(env_file, override=True)
    _settings = ContractSettings()
    logger.info("Reloaded settings", environment=_settings.environment)
    return _settings

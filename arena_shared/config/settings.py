"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ChainMode(str, Enum):
    """Ledger operation mode."""

    MOCK = "mock"
    TESTNET = "testnet"
    MAINNET = "mainnet"


class BettingSettings(BaseSettings):
    """Spectator betting pool configuration."""

    model_config = SettingsConfigDict(env_prefix="BETTING_")

    # 1% protocol fee on each deposit
    fee_bps: int = Field(default=100, ge=0, le=10_000)
    # 0.1 XLM in stroops
    min_bet: int = Field(default=1_000_000, gt=0)
    sweep_interval_seconds: int = 86_400
    retention_seconds: int = 30 * 86_400


class ArenaSettings(BaseSettings):
    """Match stake and zk gate configuration."""

    model_config = SettingsConfigDict(env_prefix="ARENA_")

    # 0.1% fee on each stake deposit
    stake_fee_bps: int = Field(default=10, ge=0, le=10_000)
    sweep_interval_seconds: int = 86_400
    retention_seconds: int = 30 * 86_400
    zk_gate_required: bool = False


class ChainSettings(BaseSettings):
    """Ledger and contract address configuration."""

    model_config = SettingsConfigDict(env_prefix="CHAIN_")

    mode: ChainMode = ChainMode.MOCK

    admin_address: str = "GADMIN"
    treasury_address: str = "GTREASURY"
    betting_contract: str = "CBETTING"
    arena_contract: str = "CARENA"
    verifier_contract: str = "CVERIFIER"


class JWTSettings(BaseSettings):
    """JWT authentication configuration."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    secret_key: SecretStr = SecretStr("your-jwt-secret-key-min-32-chars-long")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class ServicePorts(BaseSettings):
    """Service port configuration."""

    wagering: int = Field(default=8010, alias="WAGERING_PORT")


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    ports: ServicePorts = Field(default_factory=ServicePorts)

    # Contracts
    betting: BettingSettings = Field(default_factory=BettingSettings)
    arena: ArenaSettings = Field(default_factory=ArenaSettings)
    chain: ChainSettings = Field(default_factory=ChainSettings)

    # Authentication
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()

"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./settlement.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    # seconds a SQLite writer waits for the database lock
    sqlite_busy_timeout: float = 30.0


class RedisSettings(BaseModel):
    url: str = "redis://localhost:6379/0"
    event_stream: str = "settlement:events"
    event_stream_maxlen: int = 100_000


class ChainSettings(BaseModel):
    rpc_url: str = "https://api.mainnet-beta.solana.com"
    token_symbol: str = "MWOR"
    token_mint: str = "MWorUJrXwCDBJrBUeCw4mKoZ2niGBKPZrmqAGuJGbeV"
    price_api_url: str = "https://price.jup.ag/v4/price"
    fallback_token_price_usd: Decimal = Decimal("0.001")
    payment_seed: str = Field(default="gamefi-payment", min_length=4)
    request_timeout_seconds: float = 5.0
    max_retries: int = 3
    balance_timeout_seconds: float = 3.0
    confirm_timeout_seconds: float = 10.0
    signatures_poll_limit: int = 20


class PaymentSettings(BaseModel):
    temp_address_ttl_seconds: int = 15 * 60
    processed_marker_ttl_seconds: int = 24 * 60 * 60
    price_tolerance: Decimal = Decimal("0.95")
    prices_usd: dict[str, Decimal] = Field(
        default_factory=lambda: {
            "cheap": Decimal("0.03"),
            "mid": Decimal("0.09"),
            "high": Decimal("0.27"),
        }
    )
    lives_per_tier: dict[str, int] = Field(default_factory=lambda: {"cheap": 1, "mid": 3, "high": 10})


class LivesSettings(BaseModel):
    """Fallbacks for games whose lives configuration omits a key."""

    daily_free_lives: int = 1
    initial_free_lives: int = 0
    claim_attempts_per_day: int = 5
    claim_window_seconds: int = 24 * 60 * 60
    bonus_divisor: int = 50_000
    bonus_cap: int = 40
    paid_life_cap: int = 10


class WebhookSettings(BaseModel):
    secret: str = Field(default="change-me", min_length=8)
    header: str = "x-webhook-secret"


class CronSettings(BaseModel):
    secret: str = Field(default="dev-cron-secret", min_length=8)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Round Settlement Server"
    api_prefix: str = "/api"
    default_game_id: str = "tetris"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    redis: RedisSettings = RedisSettings()
    chain: ChainSettings = ChainSettings()
    payments: PaymentSettings = PaymentSettings()
    lives: LivesSettings = LivesSettings()
    webhook: WebhookSettings = WebhookSettings()
    cron: CronSettings = CronSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def redis_url(self) -> str:
        return self.redis.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def webhook_secret(self) -> str:
        return self.webhook.secret

    @property
    def cron_secret(self) -> str:
        return self.cron.secret


@lru_cache()
def get_settings() -> Settings:
    return Settings()

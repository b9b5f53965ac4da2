from functools import lru_cache
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_API_BASE_URL, RATES_CACHE_TTL_SECONDS, DEBOUNCE_SECONDS).
    """

    # Basic app metadata
    app_name: str = "Currency Converter"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rates / caching
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"  # base currency appended as last path segment
    rates_cache_ttl_seconds: float = 300.0  # 5 minutes
    http_timeout_seconds: float = 10.0

    # Widget behaviour
    debounce_seconds: float = 0.5
    initial_convert_delay_seconds: float = 1.0
    bootstrap_on_startup: bool = True
    default_amount: str = "1"
    default_from_currency: str = "USD"
    default_to_currency: str = "EUR"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def init_post_load(self) -> None:
        """Normalize derived fields and validate widget timings."""
        self.default_from_currency = self.default_from_currency.upper()
        self.default_to_currency = self.default_to_currency.upper()
        if self.rates_cache_ttl_seconds < 0:
            raise ValueError("rates_cache_ttl_seconds cannot be negative")
        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds cannot be negative")

    @property
    def provider_base_url(self) -> str:
        return str(self.exchange_api_base_url).rstrip("/")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings

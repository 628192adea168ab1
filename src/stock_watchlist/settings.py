"""Environment-driven settings for provider selection and HTTP behaviour."""
import os

from pydantic import BaseModel, ConfigDict

# Example values from the setup docs; treated the same as an unset key.
PLACEHOLDER_API_KEYS = frozenset({"your-alpha-vantage-api-key", "your-finnhub-api-key"})


def usable_api_key(key: str | None) -> str | None:
    """Return the key if it is set and not a placeholder, else None."""
    if key is None:
        return None
    key = key.strip()
    if not key or key in PLACEHOLDER_API_KEYS:
        return None
    return key


class ProviderSettings(BaseModel):
    """Provider configuration. Built from the environment by from_env()."""

    model_config = ConfigDict(frozen=True)

    provider: str | None = None
    alpha_vantage_api_key: str | None = None
    finnhub_api_key: str | None = None
    request_timeout: float = 10.0
    stream_poll_interval: float = 30.0

    @classmethod
    def from_env(cls) -> "ProviderSettings":
        """Read MARKET_DATA_PROVIDER, *_API_KEY and tuning variables."""
        values: dict[str, str] = {}
        for field, env_var in (
            ("provider", "MARKET_DATA_PROVIDER"),
            ("alpha_vantage_api_key", "ALPHA_VANTAGE_API_KEY"),
            ("finnhub_api_key", "FINNHUB_API_KEY"),
            ("request_timeout", "MARKET_DATA_REQUEST_TIMEOUT"),
            ("stream_poll_interval", "QUOTE_STREAM_POLL_INTERVAL"),
        ):
            value = os.getenv(env_var)
            if value:
                values[field] = value
        return cls.model_validate(values)

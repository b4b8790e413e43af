"""Remote store configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

STORE_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Connection settings for the target store API."""

    base_url: str
    project_key: str
    access_token: str
    resilience: ResilienceConfig


def get_store_config(*, resilience: ResilienceConfig | None = None) -> StoreConfig:
    values = require_env_vars(("STORE_API_URL", "STORE_PROJECT_KEY", "STORE_ACCESS_TOKEN"))
    base_url = values["STORE_API_URL"].rstrip("/")
    access_token = values["STORE_ACCESS_TOKEN"]
    return StoreConfig(
        base_url=base_url,
        project_key=values["STORE_PROJECT_KEY"],
        access_token=access_token,
        resilience=resilience
        or ResilienceConfig(
            name="store",
            base_url=base_url,
            timeout_seconds=STORE_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
            cache=CacheConfig(enabled=False),
            default_headers={"Authorization": f"Bearer {access_token}"},
        ),
    )

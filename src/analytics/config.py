"""Runtime settings read from the environment.

    ORDER_SOURCE              fake (default) | shopify
    SHOP_NAME                 shop subdomain, e.g. "acme" for acme.myshopify.com
    ACCESS_TOKEN              Admin API access token
    SHOPIFY_API_VERSION       default 2024-01
    ALLOWED_ORIGINS           comma separated CORS origins
    CACHE_TTL_SECONDS         default 300
    PAGE_DELAY_SECONDS        default 0.5
    UPSTREAM_TIMEOUT_SECONDS  default 30
    PROTEAN_ENV               development (default) | test | production
"""

import os
from dataclasses import dataclass, field

from analytics.errors import ConfigurationError
from analytics.utils.logging import current_environment

DEFAULT_ALLOWED_ORIGINS = ("http://localhost:3000",)


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    order_source: str = "fake"
    shop_name: str | None = None
    access_token: str | None = field(default=None, repr=False)
    api_version: str = "2024-01"
    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    cache_ttl_seconds: float = 300.0
    page_delay_seconds: float = 0.5
    upstream_timeout_seconds: float = 30.0
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("ALLOWED_ORIGINS")
        return cls(
            order_source=os.environ.get("ORDER_SOURCE", "fake").strip().lower(),
            shop_name=os.environ.get("SHOP_NAME") or None,
            access_token=os.environ.get("ACCESS_TOKEN") or None,
            api_version=os.environ.get("SHOPIFY_API_VERSION", "2024-01"),
            allowed_origins=(
                tuple(o.strip() for o in origins.split(",") if o.strip()) if origins else DEFAULT_ALLOWED_ORIGINS
            ),
            cache_ttl_seconds=_float_env("CACHE_TTL_SECONDS", 300.0),
            page_delay_seconds=_float_env("PAGE_DELAY_SECONDS", 0.5),
            upstream_timeout_seconds=_float_env("UPSTREAM_TIMEOUT_SECONDS", 30.0),
            environment=current_environment(),
        )

    def require_shopify_credentials(self) -> None:
        missing = [name for name, value in (("SHOP_NAME", self.shop_name), ("ACCESS_TOKEN", self.access_token)) if not value]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

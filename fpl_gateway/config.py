import os
from dataclasses import dataclass, field
from typing import List, Optional

from fpl_gateway.constants import DEFAULT_POLL_INTERVAL, FPL_BASE_URL, LOCAL_API_PREFIX


# =============================================================================
# GATEWAY CONFIGURATION - read from environment, defaults suit local dev
# =============================================================================

def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    if raw.strip().lower() == "none":
        return None
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass
class ProxyConfig:
    """
    Edge proxy configuration.

    The proxy is a relay: one upstream GET per cache miss, no auth.
    Retries are off by default so a single upstream failure surfaces as a
    single proxy failure; set FPL_UPSTREAM_RETRIES to opt into backoff.
    """

    upstream_base_url: str = FPL_BASE_URL
    user_agent: str = "FPL-Gateway/1.0"

    # None leaves the timeout to httpx defaults
    upstream_timeout: Optional[float] = 30.0
    upstream_retries: int = 0
    retry_base_delay: float = 1.0

    cache_enabled: bool = True
    cache_max_entries: int = 512

    # Check upstream bodies against the permissive schemas in models.py
    validate_upstream: bool = False

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        defaults = cls()
        return cls(
            upstream_base_url=os.environ.get("FPL_BASE_URL", defaults.upstream_base_url).rstrip("/"),
            user_agent=os.environ.get("FPL_USER_AGENT", defaults.user_agent),
            upstream_timeout=_env_float("FPL_UPSTREAM_TIMEOUT", defaults.upstream_timeout),
            upstream_retries=max(0, _env_int("FPL_UPSTREAM_RETRIES", defaults.upstream_retries)),
            retry_base_delay=_env_float("FPL_RETRY_BASE_DELAY", defaults.retry_base_delay),
            cache_enabled=_env_bool("FPL_CACHE_ENABLED", defaults.cache_enabled),
            cache_max_entries=_env_int("FPL_CACHE_MAX_ENTRIES", defaults.cache_max_entries),
            validate_upstream=_env_bool("FPL_VALIDATE_UPSTREAM", defaults.validate_upstream),
            cors_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
        )


@dataclass
class ClientConfig:
    """Client data-access configuration (where the gateway lives, how often to poll)."""

    gateway_url: str = "http://localhost:8000"
    api_prefix: str = LOCAL_API_PREFIX
    poll_interval: float = DEFAULT_POLL_INTERVAL  # live gameweek auto-refresh

    @classmethod
    def from_env(cls) -> "ClientConfig":
        defaults = cls()
        return cls(
            gateway_url=os.environ.get("FPL_GATEWAY_URL", defaults.gateway_url).rstrip("/"),
            api_prefix=defaults.api_prefix,
            poll_interval=_env_float("FPL_POLL_INTERVAL", defaults.poll_interval),
        )

"""
FPL Gateway - Services Module

Upstream HTTP client, the single-GET fetcher with optional bounded retry,
and the read-through relay every proxy route goes through.
"""

import asyncio
import random
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from fpl_gateway.cache import ResponseCache
from fpl_gateway.config import ProxyConfig
from fpl_gateway.errors import ProxyError, UpstreamShapeError
from fpl_gateway.models import UpstreamResource


logger = logging.getLogger("fpl_gateway")

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


# ============ HTTP CLIENT ============

def build_http_client(
    config: ProxyConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Upstream client: JSON content type, no auth, fixed base URL."""
    kwargs = {
        "base_url": config.upstream_base_url,
        "limits": httpx.Limits(max_keepalive_connections=20, max_connections=50),
        "headers": {
            "Content-Type": "application/json",
            "User-Agent": config.user_agent,
        },
    }
    if config.upstream_timeout is not None:
        kwargs["timeout"] = config.upstream_timeout
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


def _retry_delay(response: Optional[httpx.Response], attempt: int, base_delay: float) -> float:
    if response is not None and response.status_code == 429:
        try:
            return float(response.headers.get("Retry-After", ""))
        except ValueError:
            pass
    return base_delay * (2 ** attempt) + random.uniform(0, 1)


async def fetch_upstream(
    client: httpx.AsyncClient,
    path: str,
    max_retries: int = 0,
    base_delay: float = 1.0,
) -> httpx.Response:
    """
    GET an upstream path. Non-2xx raises httpx.HTTPStatusError.

    With max_retries=0 (the default) this is exactly one request. Otherwise
    429/5xx and transport errors are retried with exponential backoff.
    """
    attempts = max(max_retries, 0) + 1
    for attempt in range(attempts):
        final = attempt == attempts - 1
        try:
            logger.info(f"Fetching {path} from FPL API")
            response = await client.get(path)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if final or status not in RETRYABLE_STATUSES:
                raise
            delay = _retry_delay(e.response, attempt, base_delay)
            logger.warning(f"Upstream {status} on {path}, retry in {delay:.1f}s")
        except httpx.TransportError as e:
            if final:
                raise
            delay = _retry_delay(None, attempt, base_delay)
            logger.warning(f"Connection error on {path}, retry in {delay:.1f}s: {e}")
        await asyncio.sleep(delay)


# ============ RELAY ============

def _describe(params: dict) -> str:
    parts = []
    if "manager_id" in params:
        parts.append(f"manager {params['manager_id']}")
    if "league_id" in params:
        parts.append(f"league {params['league_id']}")
    if "player_id" in params:
        parts.append(f"player {params['player_id']}")
    if "gameweek" in params:
        parts.append(f"GW{params['gameweek']}")
    return f" for {' '.join(parts)}" if parts else ""


async def relay(
    client: httpx.AsyncClient,
    response_cache: ResponseCache,
    resource: UpstreamResource,
    config: ProxyConfig,
    **params,
) -> bytes:
    """
    Return the upstream body for a resource, byte for byte.

    Fresh cache entries short-circuit the upstream call. Failures come out as
    ProxyError: 404 with the resource's not-found message for an upstream
    404, 500 with its failure message for anything else.
    """
    path = resource.upstream_path(**params)

    if config.cache_enabled:
        hit = response_cache.get(path)
        if hit is not None:
            logger.debug(f"Cache hit for {path}")
            return hit[0]

    context = _describe(params)
    try:
        response = await fetch_upstream(client, path, config.upstream_retries, config.retry_base_delay)
        payload = response.json()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status == 404:
            logger.info(f"{resource.label} not found{context}")
            raise ProxyError(404, resource.not_found_message(**params)) from e
        logger.error(f"{resource.label} API Error{context}: FPL API responded with status: {status}")
        raise ProxyError(500, resource.failure_message(**params)) from e
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"{resource.label} API Error{context}: {e!r}")
        raise ProxyError(500, resource.failure_message(**params)) from e

    if config.validate_upstream and resource.schema is not None:
        try:
            resource.schema.model_validate(payload)
        except ValidationError as e:
            logger.error(f"{resource.label} API Error{context}: unexpected shape ({e.error_count()} errors)")
            raise UpstreamShapeError(resource.name) from e

    body = response.content
    if config.cache_enabled:
        response_cache.put(path, body, resource.directive.max_age)
    return body

"""
FPL Gateway - Endpoints Module

FastAPI app factory, CORS middleware, lifespan handler, error envelope
handlers and one GET route per upstream FPL resource.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from fpl_gateway.cache import ResponseCache, cache as default_cache
from fpl_gateway.config import ProxyConfig
from fpl_gateway.constants import LOCAL_API_PREFIX
from fpl_gateway.errors import ProxyError
from fpl_gateway.models import ErrorEnvelope, HealthResponse, UpstreamResource
from fpl_gateway.resources import (
    BOOTSTRAP_STATIC, FIXTURES, EVENT_STATUS, LIVE_GAMEWEEK, DREAM_TEAM,
    LEAGUE_STANDINGS, MANAGER_PROFILE, MANAGER_HISTORY, MANAGER_TRANSFERS,
    MANAGER_PICKS, PLAYER_SUMMARY,
)
from fpl_gateway.services import build_http_client, relay
from fpl_gateway.validation import validate_id, validate_gameweek, validate_page


logger = logging.getLogger("fpl_gateway")

router = APIRouter(
    prefix=LOCAL_API_PREFIX,
    responses={
        400: {"model": ErrorEnvelope, "description": "Invalid route parameter"},
        404: {"model": ErrorEnvelope, "description": "Not found upstream"},
        500: {"model": ErrorEnvelope, "description": "Upstream or network failure"},
    },
)


# ============ HELPERS ============

def get_http_client(app: FastAPI) -> httpx.AsyncClient:
    """Shared upstream client, created on first use if the lifespan did not run."""
    if app.state.http_client is None:
        app.state.http_client = build_http_client(app.state.config, app.state.transport)
    return app.state.http_client


async def _relay_response(request: Request, resource: UpstreamResource, **params) -> Response:
    app = request.app
    body = await relay(
        get_http_client(app), app.state.cache, resource, app.state.config, **params
    )
    return Response(
        content=body,
        media_type="application/json",
        headers={"Cache-Control": resource.directive.header_value},
    )


# ============ GAME DATA ============

@router.get("/bootstrap-static")
async def get_bootstrap_static(request: Request):
    return await _relay_response(request, BOOTSTRAP_STATIC)


@router.get("/fixtures")
async def get_fixtures(request: Request):
    return await _relay_response(request, FIXTURES)


@router.get("/event-status")
async def get_event_status(request: Request):
    return await _relay_response(request, EVENT_STATUS)


@router.get("/live/{gameweek}")
async def get_live_gameweek(request: Request, gameweek: str):
    gw = validate_gameweek(gameweek)
    return await _relay_response(request, LIVE_GAMEWEEK, gameweek=gw)


@router.get("/dream-team/{gameweek}")
async def get_dream_team(request: Request, gameweek: str):
    gw = validate_gameweek(gameweek)
    return await _relay_response(request, DREAM_TEAM, gameweek=gw)


@router.get("/player/{player_id}")
async def get_player_summary(request: Request, player_id: str):
    pid = validate_id(player_id, "player ID")
    return await _relay_response(request, PLAYER_SUMMARY, player_id=pid)


@router.get("/league/{league_id}")
async def get_league_standings(request: Request, league_id: str, page: Optional[str] = Query(None)):
    lid = validate_id(league_id, "league ID")
    page_number = validate_page(page)
    return await _relay_response(request, LEAGUE_STANDINGS, league_id=lid, page=page_number)


# ============ MANAGER DATA ============

@router.get("/manager/{manager_id}")
async def get_manager_profile(request: Request, manager_id: str):
    mid = validate_id(manager_id, "manager ID")
    return await _relay_response(request, MANAGER_PROFILE, manager_id=mid)


@router.get("/manager/{manager_id}/history")
async def get_manager_history(request: Request, manager_id: str):
    mid = validate_id(manager_id, "manager ID")
    return await _relay_response(request, MANAGER_HISTORY, manager_id=mid)


@router.get("/manager/{manager_id}/transfers")
async def get_manager_transfers(request: Request, manager_id: str):
    mid = validate_id(manager_id, "manager ID")
    return await _relay_response(request, MANAGER_TRANSFERS, manager_id=mid)


@router.get("/manager/{manager_id}/picks/{gameweek}")
async def get_manager_picks(request: Request, manager_id: str, gameweek: str):
    mid = validate_id(manager_id, "manager ID")
    gw = validate_gameweek(gameweek)
    return await _relay_response(request, MANAGER_PICKS, manager_id=mid, gameweek=gw)


# ============ APP FACTORY ============

def create_app(
    config: Optional[ProxyConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    response_cache: Optional[ResponseCache] = None,
) -> FastAPI:
    config = config or ProxyConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        app.state.http_client = build_http_client(config, transport)
        logger.info(f"Relaying FPL API from {config.upstream_base_url}")
        yield
        if app.state.http_client is not None:
            await app.state.http_client.aclose()
            app.state.http_client = None

    app = FastAPI(title="FPL Gateway", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.transport = transport
    app.state.http_client = None
    app.state.cache = response_cache if response_cache is not None else ResponseCache(config.cache_max_entries)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        return JSONResponse(exc.to_envelope(), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint with cache status."""
        return HealthResponse(
            status="ok",
            cache_entries=len(app.state.cache),
            cache_enabled=config.cache_enabled,
            validate_upstream=config.validate_upstream,
            upstream_retries=config.upstream_retries,
        )

    app.include_router(router)
    return app


app = create_app(response_cache=default_cache)

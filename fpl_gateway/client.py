"""
FPL Gateway - Client Data-Access Service

One coroutine per proxy route. Each returns parsed JSON or raises
FPLServiceError labelled with the resource it was after. No retry and no
caching here; freshness is the proxy's job.
"""

import logging
from typing import Any, Optional

import httpx

from fpl_gateway.config import ClientConfig
from fpl_gateway.errors import FPLServiceError
from fpl_gateway.resources import (
    BOOTSTRAP_STATIC, FIXTURES, EVENT_STATUS, LIVE_GAMEWEEK, DREAM_TEAM,
    LEAGUE_STANDINGS, MANAGER_PROFILE, MANAGER_HISTORY, MANAGER_TRANSFERS,
    MANAGER_PICKS, PLAYER_SUMMARY,
)


logger = logging.getLogger("fpl_gateway")


class FPLService:
    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ClientConfig.from_env()
        kwargs = {"base_url": self.config.gateway_url}
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def __aenter__(self) -> "FPLService":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _get_json(self, path: str, failure: str, params: Optional[dict] = None) -> Any:
        url = f"{self.config.api_prefix}{path}"
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"{failure}: HTTP error! status: {e.response.status_code}")
            raise FPLServiceError(failure, e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"{failure}: {e!r}")
            raise FPLServiceError(failure) from e

    # ============ GAME DATA ============

    async def get_bootstrap_static(self) -> dict:
        return await self._get_json("/bootstrap-static", BOOTSTRAP_STATIC.failure_message())

    async def get_fixtures(self) -> list:
        return await self._get_json("/fixtures", FIXTURES.failure_message())

    async def get_event_status(self) -> dict:
        return await self._get_json("/event-status", EVENT_STATUS.failure_message())

    async def get_live_gameweek(self, gameweek: int) -> dict:
        return await self._get_json(
            f"/live/{gameweek}", LIVE_GAMEWEEK.failure_message(gameweek=gameweek)
        )

    async def get_dream_team(self, gameweek: int) -> dict:
        return await self._get_json(
            f"/dream-team/{gameweek}", DREAM_TEAM.failure_message(gameweek=gameweek)
        )

    async def get_player_summary(self, player_id: int) -> dict:
        return await self._get_json(
            f"/player/{player_id}", PLAYER_SUMMARY.failure_message(player_id=player_id)
        )

    async def get_league_standings(self, league_id: int, page: int = 1) -> dict:
        return await self._get_json(
            f"/league/{league_id}",
            LEAGUE_STANDINGS.failure_message(league_id=league_id),
            params={"page": page},
        )

    # ============ MANAGER DATA ============

    async def get_manager_profile(self, manager_id: int) -> dict:
        return await self._get_json(
            f"/manager/{manager_id}", MANAGER_PROFILE.failure_message(manager_id=manager_id)
        )

    async def get_manager_history(self, manager_id: int) -> dict:
        return await self._get_json(
            f"/manager/{manager_id}/history", MANAGER_HISTORY.failure_message(manager_id=manager_id)
        )

    async def get_manager_transfers(self, manager_id: int) -> list:
        return await self._get_json(
            f"/manager/{manager_id}/transfers", MANAGER_TRANSFERS.failure_message(manager_id=manager_id)
        )

    async def get_manager_picks(self, manager_id: int, gameweek: int) -> dict:
        return await self._get_json(
            f"/manager/{manager_id}/picks/{gameweek}",
            MANAGER_PICKS.failure_message(manager_id=manager_id, gameweek=gameweek),
        )

"""
FPL Gateway - Loaders

Stateful wrappers around FPLService calls. Each loader keeps a
data/loading/error triple, re-fetches when its key input changes and can
be torn down with close().

Every load runs under a CancellationToken. Changing the key or closing the
loader cancels the token, and a load whose token was cancelled never
writes state, so a slow response for an old key cannot overwrite the new one.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fpl_gateway.client import FPLService
from fpl_gateway.errors import FPLServiceError
from fpl_gateway.helpers import get_upcoming_fixtures, get_average_fdr, get_gameweek_fixtures


logger = logging.getLogger("fpl_gateway")


class CancellationToken:
    __slots__ = ("cancelled",)

    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


@dataclass
class LoadState:
    data: Any = None
    loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


@dataclass
class ManagerDataState(LoadState):
    profile: Optional[Dict] = None
    history: Optional[Dict] = None
    current_picks: Optional[Dict] = None


# ============ BASE ============

class ResourceLoader:
    """Single service call behind a LoadState. Skips the fetch while the key is empty."""

    requires_key = True

    def __init__(self, service: FPLService, key: Any = None, initial_data: Any = None, loading: bool = False):
        self.service = service
        self.key = key
        self.state = self._initial_state(initial_data, loading)
        self._token = CancellationToken()

    def _initial_state(self, initial_data: Any, loading: bool) -> LoadState:
        return LoadState(data=initial_data, loading=loading)

    async def _call(self, key: Any) -> Any:
        raise NotImplementedError

    @property
    def closed(self) -> bool:
        return self._token.cancelled

    async def load(self) -> LoadState:
        if self._token.cancelled or (self.requires_key and not self.key):
            return self.state
        token = self._token
        self.state.loading = True
        try:
            data = await self._call(self.key)
        except FPLServiceError as e:
            if not token.cancelled:
                self.state.error = str(e)
        else:
            if not token.cancelled:
                self.state.data = data
                self.state.error = None
                self.state.last_updated = datetime.now()
        finally:
            if not token.cancelled:
                self.state.loading = False
        return self.state

    refetch = load

    async def set_key(self, key: Any) -> LoadState:
        """Switch to a new key: in-flight loads for the old one are discarded."""
        if key == self.key:
            return self.state
        self._token.cancel()
        self._token = CancellationToken()
        self.key = key
        return await self.load()

    def close(self):
        self._token.cancel()


# ============ SINGLE RESOURCE ============

class BootstrapLoader(ResourceLoader):
    requires_key = False

    def __init__(self, service: FPLService):
        super().__init__(service, loading=True)

    async def _call(self, key):
        return await self.service.get_bootstrap_static()


class FixturesLoader(ResourceLoader):
    """All fixtures, plus the per-team and per-gameweek views built on them."""

    requires_key = False

    def __init__(self, service: FPLService):
        super().__init__(service, initial_data=[], loading=True)

    async def _call(self, key):
        return await self.service.get_fixtures()

    def for_team(self, team_id: Optional[int], num_fixtures: int = 5) -> List[Dict]:
        if not self.state.data or not team_id:
            return []
        return get_upcoming_fixtures(self.state.data, team_id, num_fixtures)

    def average_fdr(self, team_id: Optional[int], num_fixtures: int = 5) -> float:
        if not self.state.data or not team_id:
            return 0
        return get_average_fdr(self.state.data, team_id, num_fixtures)

    def for_gameweek(self, gameweek: Optional[int]) -> List[Dict]:
        if not self.state.data or not gameweek:
            return []
        return get_gameweek_fixtures(self.state.data, gameweek)


class PlayerDetailsLoader(ResourceLoader):
    async def _call(self, player_id):
        return await self.service.get_player_summary(player_id)


class DreamTeamLoader(ResourceLoader):
    async def _call(self, gameweek):
        return await self.service.get_dream_team(gameweek)


class LeagueLoader(ResourceLoader):
    def __init__(self, service: FPLService, league_id: Optional[int] = None, page: int = 1):
        super().__init__(service, key=league_id)
        self.page = page

    async def _call(self, league_id):
        return await self.service.get_league_standings(league_id, self.page)

    async def set_page(self, page: int) -> LoadState:
        if page == self.page:
            return self.state
        self._token.cancel()
        self._token = CancellationToken()
        self.page = page
        return await self.load()


# ============ DEPENDENT SEQUENCE ============

class ManagerDataLoader(ResourceLoader):
    """
    Profile and history fetched together; picks only once history is in.

    The picks gameweek is the last entry of history["current"], so picks can
    never be requested before both earlier calls have resolved. A manager
    with no completed gameweek gets no picks request at all.
    """

    def _initial_state(self, initial_data, loading) -> ManagerDataState:
        return ManagerDataState(data=initial_data, loading=loading)

    async def load(self) -> ManagerDataState:
        if self._token.cancelled or not self.key:
            return self.state
        token = self._token
        manager_id = self.key
        self.state.loading = True
        self.state.error = None
        try:
            profile, history = await asyncio.gather(
                self.service.get_manager_profile(manager_id),
                self.service.get_manager_history(manager_id),
            )
            if token.cancelled:
                return self.state
            self.state.profile = profile
            self.state.history = history

            current = (history or {}).get("current") or []
            if current:
                gameweek = current[-1]["event"]
                picks = await self.service.get_manager_picks(manager_id, gameweek)
                if token.cancelled:
                    return self.state
                self.state.current_picks = picks
            else:
                self.state.current_picks = None
            self.state.last_updated = datetime.now()
        except FPLServiceError as e:
            if not token.cancelled:
                self.state.error = str(e)
        finally:
            if not token.cancelled:
                self.state.loading = False
        return self.state

    refetch = load

    async def set_key(self, manager_id: Any) -> ManagerDataState:
        if manager_id != self.key:
            # Nothing from the previous manager survives the switch
            self.state.profile = None
            self.state.history = None
            self.state.current_picks = None
            self.state.data = None
            self.state.error = None
        return await super().set_key(manager_id)


# ============ POLLING ============

class LiveGameweekPoller(ResourceLoader):
    """
    Live gameweek data, optionally re-fetched every `interval` seconds
    (the service config's poll_interval unless given).

    Changing the gameweek or the auto_refresh flag stops the running
    interval before a new one is scheduled, so two intervals never overlap.
    """

    def __init__(
        self,
        service: FPLService,
        gameweek: Optional[int] = None,
        auto_refresh: bool = False,
        interval: Optional[float] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        super().__init__(service, key=gameweek)
        self.auto_refresh = auto_refresh
        self.interval = interval if interval is not None else service.config.poll_interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    async def _call(self, gameweek):
        return await self.service.get_live_gameweek(gameweek)

    @property
    def polling(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> LoadState:
        await self.load()
        self._schedule()
        return self.state

    async def refresh(self) -> LoadState:
        return await self.load()

    def set_auto_refresh(self, enabled: bool):
        """Must be called from inside the running event loop."""
        self.auto_refresh = enabled
        self._schedule()

    async def set_key(self, gameweek: Optional[int]) -> LoadState:
        if gameweek == self.key:
            return self.state
        self._stop_polling()
        await super().set_key(gameweek)
        self._schedule()
        return self.state

    def close(self):
        self._stop_polling()
        super().close()

    async def aclose(self):
        task = self._task
        self.close()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def __aenter__(self) -> "LiveGameweekPoller":
        await self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def _schedule(self):
        self._stop_polling()
        if self.auto_refresh and self.key and not self._token.cancelled:
            self._task = asyncio.create_task(self._poll(self._token))

    def _stop_polling(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _poll(self, token: CancellationToken):
        while not token.cancelled:
            await self._sleep(self.interval)
            if token.cancelled:
                break
            logger.debug(f"Refreshing live data for GW{self.key}")
            await self.load()

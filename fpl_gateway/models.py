from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, RootModel

from fpl_gateway.constants import STALE_WHILE_REVALIDATE_FACTOR


# ============ CACHE DIRECTIVE & RESOURCE DESCRIPTOR ============

@dataclass(frozen=True)
class CacheDirective:
    """Freshness window mirrored to downstream caches via Cache-Control."""
    max_age: int

    @property
    def stale_while_revalidate(self) -> int:
        return self.max_age * STALE_WHILE_REVALIDATE_FACTOR

    @property
    def header_value(self) -> str:
        return f"public, s-maxage={self.max_age}, stale-while-revalidate={self.stale_while_revalidate}"


@dataclass(frozen=True)
class UpstreamResource:
    """
    One upstream FPL resource as the proxy sees it.

    path, failure and not_found are str.format templates filled with the
    validated route parameters (manager_id, league_id, player_id, gameweek, page).
    """
    name: str
    label: str  # used in log lines, e.g. "Manager Profile"
    path: str
    directive: CacheDirective
    failure: str
    not_found: str
    schema: Optional[Type[BaseModel]] = None

    def upstream_path(self, **params) -> str:
        return self.path.format(**params)

    def failure_message(self, **params) -> str:
        return self.failure.format(**params)

    def not_found_message(self, **params) -> str:
        return self.not_found.format(**params)


# ============ UPSTREAM SCHEMAS ============
# Permissive: they pin the keys the client relies on and let
# everything else through untouched.

class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


class BootstrapStatic(_Loose):
    events: List[Dict[str, Any]]
    teams: List[Dict[str, Any]]
    elements: List[Dict[str, Any]]


class FixtureList(RootModel[List[Dict[str, Any]]]):
    pass


class EventStatus(_Loose):
    status: List[Dict[str, Any]]


class LiveGameweek(_Loose):
    elements: List[Dict[str, Any]]


class DreamTeam(_Loose):
    team: List[Dict[str, Any]]


class LeagueStandings(_Loose):
    league: Dict[str, Any]
    standings: Dict[str, Any]


class ManagerProfile(_Loose):
    id: int


class ManagerHistory(_Loose):
    current: List[Dict[str, Any]]


class ManagerTransfers(RootModel[List[Dict[str, Any]]]):
    pass


class ManagerPicks(_Loose):
    picks: List[Dict[str, Any]]


class PlayerSummary(_Loose):
    history: List[Dict[str, Any]]
    fixtures: List[Dict[str, Any]]


# ============ RESPONSE SCHEMAS ============

class ErrorEnvelope(BaseModel):
    """The only body returned on a failure path."""
    error: str


class HealthResponse(BaseModel):
    status: str
    cache_entries: int
    cache_enabled: bool
    validate_upstream: bool
    upstream_retries: int

"""
FPL Gateway - Resource Registry

One entry per upstream FPL resource. Routes, the client service and the
tests all read paths, cache windows and messages from here.
"""

from typing import Dict

from fpl_gateway.constants import (
    CACHE_WINDOW_LIVE, CACHE_WINDOW_MODERATE, CACHE_WINDOW_PER_GAMEWEEK,
    CACHE_WINDOW_BOOTSTRAP, CACHE_WINDOW_STATIC,
)
from fpl_gateway.models import (
    CacheDirective, UpstreamResource,
    BootstrapStatic, FixtureList, EventStatus, LiveGameweek, DreamTeam,
    LeagueStandings, ManagerProfile, ManagerHistory, ManagerTransfers,
    ManagerPicks, PlayerSummary,
)


BOOTSTRAP_STATIC = UpstreamResource(
    name="bootstrap data",
    label="Bootstrap Static",
    path="/bootstrap-static/",
    directive=CacheDirective(CACHE_WINDOW_BOOTSTRAP),
    failure="Failed to fetch bootstrap data",
    not_found="Bootstrap data not found",
    schema=BootstrapStatic,
)

FIXTURES = UpstreamResource(
    name="fixtures",
    label="Fixtures",
    path="/fixtures/",
    directive=CacheDirective(CACHE_WINDOW_STATIC),
    failure="Failed to fetch fixtures",
    not_found="Fixtures not found",
    schema=FixtureList,
)

EVENT_STATUS = UpstreamResource(
    name="event status",
    label="Event Status",
    path="/event-status/",
    directive=CacheDirective(CACHE_WINDOW_MODERATE),
    failure="Failed to fetch event status",
    not_found="Event status not found",
    schema=EventStatus,
)

LIVE_GAMEWEEK = UpstreamResource(
    name="live gameweek",
    label="Live Gameweek",
    path="/event/{gameweek}/live/",
    directive=CacheDirective(CACHE_WINDOW_LIVE),
    failure="Failed to fetch live data for GW{gameweek}",
    not_found="Live data not found for this gameweek",
    schema=LiveGameweek,
)

DREAM_TEAM = UpstreamResource(
    name="dream team",
    label="Dream Team",
    path="/dream-team/{gameweek}/",
    directive=CacheDirective(CACHE_WINDOW_STATIC),
    failure="Failed to fetch dream team for GW{gameweek}",
    not_found="Dream team not found for this gameweek",
    schema=DreamTeam,
)

LEAGUE_STANDINGS = UpstreamResource(
    name="league standings",
    label="League Standings",
    path="/leagues-classic/{league_id}/standings/?page_standings={page}",
    directive=CacheDirective(CACHE_WINDOW_PER_GAMEWEEK),
    failure="Failed to fetch league {league_id} standings",
    not_found="League not found",
    schema=LeagueStandings,
)

MANAGER_PROFILE = UpstreamResource(
    name="manager profile",
    label="Manager Profile",
    path="/entry/{manager_id}/",
    directive=CacheDirective(CACHE_WINDOW_MODERATE),
    failure="Failed to fetch manager {manager_id} profile",
    not_found="Manager not found",
    schema=ManagerProfile,
)

MANAGER_HISTORY = UpstreamResource(
    name="manager history",
    label="Manager History",
    path="/entry/{manager_id}/history/",
    directive=CacheDirective(CACHE_WINDOW_PER_GAMEWEEK),
    failure="Failed to fetch manager {manager_id} history",
    not_found="Manager history not found",
    schema=ManagerHistory,
)

MANAGER_TRANSFERS = UpstreamResource(
    name="manager transfers",
    label="Manager Transfers",
    path="/entry/{manager_id}/transfers/",
    directive=CacheDirective(CACHE_WINDOW_MODERATE),
    failure="Failed to fetch manager {manager_id} transfers",
    not_found="Manager transfers not found",
    schema=ManagerTransfers,
)

MANAGER_PICKS = UpstreamResource(
    name="manager picks",
    label="Manager Picks",
    path="/entry/{manager_id}/event/{gameweek}/picks/",
    directive=CacheDirective(CACHE_WINDOW_MODERATE),
    failure="Failed to fetch manager {manager_id} picks for GW{gameweek}",
    not_found="Manager picks not found for this gameweek",
    schema=ManagerPicks,
)

PLAYER_SUMMARY = UpstreamResource(
    name="player summary",
    label="Player Summary",
    path="/element-summary/{player_id}/",
    directive=CacheDirective(CACHE_WINDOW_PER_GAMEWEEK),
    failure="Failed to fetch player {player_id} summary",
    not_found="Player not found",
    schema=PlayerSummary,
)


RESOURCES: Dict[str, UpstreamResource] = {
    "bootstrap_static": BOOTSTRAP_STATIC,
    "fixtures": FIXTURES,
    "event_status": EVENT_STATUS,
    "live_gameweek": LIVE_GAMEWEEK,
    "dream_team": DREAM_TEAM,
    "league_standings": LEAGUE_STANDINGS,
    "manager_profile": MANAGER_PROFILE,
    "manager_history": MANAGER_HISTORY,
    "manager_transfers": MANAGER_TRANSFERS,
    "manager_picks": MANAGER_PICKS,
    "player_summary": PLAYER_SUMMARY,
}

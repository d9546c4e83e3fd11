"""
FPL Gateway - Constants Module

Upstream location, route bounds, cache windows and the team-planner
lookup tables shared by the proxy and the client layer.
"""

from typing import Dict


FPL_BASE_URL = "https://fantasy.premierleague.com/api"
LOCAL_API_PREFIX = "/api/fpl"

MIN_GAMEWEEK = 1
MAX_GAMEWEEK = 38
MAX_ID_DIGITS = 18  # upstream IDs fit a signed 64-bit int

DEFAULT_POLL_INTERVAL = 30  # seconds between live gameweek refreshes


# =============================================================================
# CACHE WINDOWS (seconds) - chosen by how often each upstream resource changes
# stale-while-revalidate is always twice the window
# =============================================================================

CACHE_WINDOW_LIVE = 120            # live points move continuously during play
CACHE_WINDOW_MODERATE = 300        # event status, manager profile/picks/transfers
CACHE_WINDOW_PER_GAMEWEEK = 600    # player summary, manager history, standings
CACHE_WINDOW_BOOTSTRAP = 900       # static game data, rarely changes intraday
CACHE_WINDOW_STATIC = 1800         # fixtures, dream team

STALE_WHILE_REVALIDATE_FACTOR = 2


# =============================================================================
# TEAM PLANNER TABLES
# =============================================================================

FORMATIONS: Dict[str, Dict[str, int]] = {
    "3-4-3": {"defenders": 3, "midfielders": 4, "forwards": 3},
    "3-5-2": {"defenders": 3, "midfielders": 5, "forwards": 2},
    "4-3-3": {"defenders": 4, "midfielders": 3, "forwards": 3},
    "4-4-2": {"defenders": 4, "midfielders": 4, "forwards": 2},
    "4-5-1": {"defenders": 4, "midfielders": 5, "forwards": 1},
    "5-3-2": {"defenders": 5, "midfielders": 3, "forwards": 2},
    "5-4-1": {"defenders": 5, "midfielders": 4, "forwards": 1},
}
DEFAULT_FORMATION = "3-4-3"

CHIPS = {
    "triple-captain": "Triple Captain",
    "bench-boost": "Bench Boost",
    "free-hit": "Free Hit",
    "wildcard": "Wildcard",
}

"""
FPL Gateway - Fixture & Gameweek Helpers

Pure derivations over fetched bootstrap/fixtures JSON. Nothing here talks
to the network.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional


def parse_kickoff(value: Optional[str]) -> Optional[datetime]:
    """FPL timestamps look like 2024-08-16T19:00:00Z. Returns None if unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


# ============ FIXTURES ============

def get_upcoming_fixtures(
    fixtures: List[Dict],
    team_id: int,
    num_fixtures: int = 5,
    now: Optional[datetime] = None,
) -> List[Dict]:
    """Unfinished fixtures for a team that kick off after now, soonest first."""
    now = _now(now)
    upcoming = []
    for fixture in fixtures:
        if team_id not in (fixture.get("team_h"), fixture.get("team_a")):
            continue
        if fixture.get("finished"):
            continue
        kickoff = parse_kickoff(fixture.get("kickoff_time"))
        if kickoff is None or kickoff <= now:
            continue
        upcoming.append((kickoff, fixture))
    upcoming.sort(key=lambda pair: pair[0])
    return [fixture for _, fixture in upcoming[:num_fixtures]]


def get_average_fdr(
    fixtures: List[Dict],
    team_id: int,
    num_fixtures: int = 5,
    now: Optional[datetime] = None,
) -> float:
    """Mean difficulty of the team's upcoming fixtures, from its own side. 0 when none."""
    upcoming = get_upcoming_fixtures(fixtures, team_id, num_fixtures, now)
    if not upcoming:
        return 0
    total = sum(
        f.get("team_h_difficulty", 0) if f.get("team_h") == team_id else f.get("team_a_difficulty", 0)
        for f in upcoming
    )
    return round(total / len(upcoming), 1)


def get_gameweek_fixtures(fixtures: List[Dict], gameweek: int) -> List[Dict]:
    """Fixtures in a gameweek ordered by kickoff; unscheduled ones last."""
    far_future = datetime.max.replace(tzinfo=timezone.utc)
    in_gw = [f for f in fixtures if f.get("event") == gameweek]
    return sorted(in_gw, key=lambda f: parse_kickoff(f.get("kickoff_time")) or far_future)


def get_fixture_difficulty(difficulty: int) -> str:
    if difficulty <= 2:
        return "Easy"
    if difficulty <= 3:
        return "Medium"
    if difficulty <= 4:
        return "Hard"
    return "Very Hard"


def get_fixture_status(fixture: Dict, now: Optional[datetime] = None) -> str:
    if fixture.get("finished"):
        return "Finished"
    kickoff = parse_kickoff(fixture.get("kickoff_time"))
    now = _now(now)
    if kickoff is None or kickoff > now:
        if kickoff is not None and (kickoff - now).total_seconds() < 2 * 3600:
            return "Starting Soon"
        return "Scheduled"
    return "Live"


# ============ GAMEWEEKS ============

def get_current_gameweek(events: List[Dict]) -> Optional[Dict]:
    """Event flagged is_current, else the first event."""
    for event in events:
        if event.get("is_current"):
            return event
    return events[0] if events else None


def get_next_gameweek(events: List[Dict]) -> Optional[Dict]:
    for event in events:
        if event.get("is_next"):
            return event
    return events[0] if events else None


def is_gameweek_live(deadline: Optional[str], now: Optional[datetime] = None) -> bool:
    """A gameweek counts as live once its deadline has passed."""
    deadline_at = parse_kickoff(deadline)
    if deadline_at is None:
        return False
    return _now(now) > deadline_at

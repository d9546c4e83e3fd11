"""
Saved team selection: the squad a user built in the planner, with its
formation, captaincy and active chip. Read once at start, written only on
an explicit save.
"""

import json
import logging
import os
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from fpl_gateway.constants import CHIPS, DEFAULT_FORMATION, FORMATIONS

logger = logging.getLogger("fpl_gateway")


class BenchSlots(BaseModel):
    goalkeeper: Optional[int] = None
    outfield: List[Optional[int]] = Field(default_factory=lambda: [None, None, None])


class SquadSlots(BaseModel):
    """Player IDs by slot; None marks an empty slot."""
    goalkeeper: Optional[int] = None
    defenders: List[Optional[int]] = Field(default_factory=lambda: [None] * 3)
    midfielders: List[Optional[int]] = Field(default_factory=lambda: [None] * 4)
    forwards: List[Optional[int]] = Field(default_factory=lambda: [None] * 3)
    bench: BenchSlots = Field(default_factory=BenchSlots)

    def player_ids(self) -> List[int]:
        slots = [self.goalkeeper, *self.defenders, *self.midfielders, *self.forwards,
                 self.bench.goalkeeper, *self.bench.outfield]
        return [pid for pid in slots if pid is not None]


class TeamSelection(BaseModel):
    team: SquadSlots = Field(default_factory=SquadSlots)
    formation: str = DEFAULT_FORMATION
    captain: Optional[int] = None
    vice_captain: Optional[int] = None
    active_chip: Optional[str] = None

    @field_validator("formation")
    @classmethod
    def _known_formation(cls, value: str) -> str:
        if value not in FORMATIONS:
            raise ValueError(f"Unknown formation {value!r}")
        return value

    @field_validator("active_chip")
    @classmethod
    def _known_chip(cls, value: Optional[str]) -> Optional[str]:
        if value in (None, ""):
            return None
        if value not in CHIPS:
            raise ValueError(f"Unknown chip {value!r}")
        return value

    def set_captain(self, player_id: int):
        # Swap roles if the vice-captain is promoted
        if self.vice_captain == player_id:
            self.vice_captain = self.captain
        self.captain = player_id

    def set_vice_captain(self, player_id: int):
        if self.captain == player_id:
            self.captain = self.vice_captain
        self.vice_captain = player_id

    def toggle_chip(self, chip: str):
        """Activating the active chip again switches it off."""
        if chip not in CHIPS:
            raise ValueError(f"Unknown chip {chip!r}")
        self.active_chip = None if self.active_chip == chip else chip


class SelectionStore:
    """JSON file holding one TeamSelection."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> TeamSelection:
        """Saved selection, or a fresh default if there is none or it is unreadable."""
        if not os.path.exists(self.path):
            return TeamSelection()
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return TeamSelection.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Failed to load saved team from {self.path}: {e}")
            return TeamSelection()

    def save(self, selection: TeamSelection):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(selection.model_dump(), f)
        logger.info(f"Saved team selection ({len(selection.team.player_ids())} players) to {self.path}")

    def clear(self) -> bool:
        if os.path.exists(self.path):
            os.remove(self.path)
            return True
        return False

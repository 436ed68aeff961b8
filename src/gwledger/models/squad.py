"""Squad state owned by the roster ledger, and the leaf committed per squad."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


# Scores are committed as 32-byte unsigned integers.
MAX_SCORE = 2**256 - 1


@dataclass
class SquadSlot:
    player_id: str
    team: str
    starter: bool = False


@dataclass
class Squad:
    owner: str
    budget: int
    free_transfers: int
    joined_period: int
    slots: List[SquadSlot] = field(default_factory=list)
    total_points: int = 0
    wildcard_used: bool = False
    captain_id: Optional[str] = None
    vice_captain_id: Optional[str] = None
    period_scores: Dict[int, int] = field(default_factory=dict)

    @property
    def player_ids(self) -> List[str]:
        return [slot.player_id for slot in self.slots]

    def find_slot(self, player_id: str) -> Optional[SquadSlot]:
        for slot in self.slots:
            if slot.player_id == player_id:
                return slot
        return None

    def team_count(self, team: str) -> int:
        return sum(1 for slot in self.slots if slot.team == team)

    def starters(self) -> List[SquadSlot]:
        return [slot for slot in self.slots if slot.starter]


class ScoreLeaf(BaseModel):
    """One (owner, score) pair committed into a period's Merkle tree."""

    owner: str = Field(..., min_length=1)
    score: int = Field(..., ge=0, le=MAX_SCORE)

    model_config = ConfigDict(frozen=True)

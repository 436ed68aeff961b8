from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class SquadSlotResponse(BaseModel):
    player_id: str
    team: str
    starter: bool


class SquadResponse(BaseModel):
    owner: str
    budget: int
    total_points: int
    free_transfers: int
    wildcard_used: bool
    captain_id: str | None
    vice_captain_id: str | None
    joined_period: int
    slots: List[SquadSlotResponse]
    period_scores: Dict[int, int]

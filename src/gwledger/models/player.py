"""Canonical player and match statistics models shared across the ledger layers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Position(str, Enum):
    GOALKEEPER = "GK"
    DEFENDER = "DEF"
    MIDFIELDER = "MID"
    FORWARD = "FWD"


class PlayerRecord(BaseModel):
    """Registry entry for a player that can be picked into a squad."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    team: str = Field(..., min_length=1)
    position: Position
    price: int = Field(..., ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class MatchStats(BaseModel):
    """Per player, per period match statistics."""

    played: bool = False
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)
    penalty_saves: int = Field(default=0, ge=0)
    penalty_misses: int = Field(default=0, ge=0)
    yellow_cards: int = Field(default=0, ge=0)
    red_cards: int = Field(default=0, ge=0)
    own_goals: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

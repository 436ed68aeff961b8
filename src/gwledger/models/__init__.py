"""Value models for players, statistics, squads and score leaves."""

from .player import MatchStats, PlayerRecord, Position
from .squad import MAX_SCORE, ScoreLeaf, Squad, SquadSlot

__all__ = [
    "MAX_SCORE",
    "MatchStats",
    "PlayerRecord",
    "Position",
    "ScoreLeaf",
    "Squad",
    "SquadSlot",
]

"""Score computation rules."""

from .engine import score_player, score_squad, score_squads

__all__ = ["score_player", "score_squad", "score_squads"]

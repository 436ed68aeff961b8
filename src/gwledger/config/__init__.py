"""Configuration helpers for league and scoring rules."""

from .rules import DEFAULT_SCORING, LeagueRules, ScoringRules, get_rules, get_scoring_rules

__all__ = [
    "DEFAULT_SCORING",
    "LeagueRules",
    "ScoringRules",
    "get_rules",
    "get_scoring_rules",
]

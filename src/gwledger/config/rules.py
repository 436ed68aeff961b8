"""League and scoring rules for the settlement ledger."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Dict, Mapping

from gwledger.models import Position


logger = logging.getLogger(__name__)

_ENV_PREFIX = "GWLEDGER_"


@dataclass(frozen=True)
class LeagueRules:
    squad_size: int = 15
    team_max_players: int = 3
    starting_budget: int = 1000
    max_free_transfers: int = 2
    transfer_cost: int = 4
    lineup_size: int = 11
    min_goalkeepers: int = 1
    max_goalkeepers: int = 1
    min_defenders: int = 3
    min_midfielders: int = 2
    min_forwards: int = 1


@dataclass(frozen=True)
class ScoringRules:
    goal_points: Mapping[Position, int]
    clean_sheet_points: Mapping[Position, int]
    penalty_save_points: Mapping[Position, int]
    assist_points: int = 3
    penalty_miss_penalty: int = 2
    yellow_card_penalty: int = 1
    red_card_penalty: int = 3
    own_goal_penalty: int = 2
    captain_multiplier: int = 2


DEFAULT_SCORING = ScoringRules(
    goal_points={
        Position.GOALKEEPER: 6,
        Position.DEFENDER: 6,
        Position.MIDFIELDER: 5,
        Position.FORWARD: 4,
    },
    clean_sheet_points={
        Position.GOALKEEPER: 4,
        Position.DEFENDER: 4,
        Position.MIDFIELDER: 1,
        Position.FORWARD: 0,
    },
    penalty_save_points={
        Position.GOALKEEPER: 5,
        Position.DEFENDER: 0,
        Position.MIDFIELDER: 0,
        Position.FORWARD: 0,
    },
)

# Integer league fields that may be overridden from the environment.
_OVERRIDABLE: Dict[str, str] = {
    "squad_size": "SQUAD_SIZE",
    "team_max_players": "TEAM_MAX_PLAYERS",
    "starting_budget": "STARTING_BUDGET",
    "max_free_transfers": "MAX_FREE_TRANSFERS",
    "transfer_cost": "TRANSFER_COST",
}


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def get_rules(base: LeagueRules | None = None) -> LeagueRules:
    """Return league rules with any ``GWLEDGER_*`` environment overrides applied."""

    rules = base or LeagueRules()
    overrides: Dict[str, int] = {}
    for field_name, suffix in _OVERRIDABLE.items():
        current = getattr(rules, field_name)
        value = _env_int(_ENV_PREFIX + suffix, current, min_value=0)
        if value != current:
            overrides[field_name] = value
    if overrides:
        logger.info("Applying league rule overrides: %s", overrides)
        rules = replace(rules, **overrides)
    return rules


def get_scoring_rules() -> ScoringRules:
    return DEFAULT_SCORING

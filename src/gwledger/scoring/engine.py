"""Deterministic player and squad scoring."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from gwledger.config import DEFAULT_SCORING, ScoringRules
from gwledger.models import MatchStats, Position, ScoreLeaf, Squad
from gwledger.registry import PlayerRegistry


def score_player(
    stats: Optional[MatchStats],
    position: Position,
    rules: ScoringRules = DEFAULT_SCORING,
) -> int:
    """Score one player's match; never negative, 0 when the player did not play."""

    if stats is None or not stats.played:
        return 0

    score = stats.goals * rules.goal_points[position]
    score += stats.clean_sheets * rules.clean_sheet_points[position]
    score += stats.penalty_saves * rules.penalty_save_points[position]
    score += stats.assists * rules.assist_points

    score -= stats.penalty_misses * rules.penalty_miss_penalty
    score -= stats.yellow_cards * rules.yellow_card_penalty
    score -= stats.red_cards * rules.red_card_penalty
    score -= stats.own_goals * rules.own_goal_penalty

    # Clamp once, after every term has been applied.
    return max(score, 0)


def _played(stats_by_player: Mapping[str, MatchStats], player_id: Optional[str]) -> bool:
    if player_id is None:
        return False
    stats = stats_by_player.get(player_id)
    return stats is not None and stats.played


def score_squad(
    squad: Squad,
    stats_by_player: Mapping[str, MatchStats],
    registry: PlayerRegistry,
    rules: ScoringRules = DEFAULT_SCORING,
) -> int:
    """Sum every slot's score, doubling the captain or, failing that, the vice-captain.

    The vice-captain is only promoted when the captain did not play; at most
    one contribution is multiplied.
    """

    if _played(stats_by_player, squad.captain_id):
        doubled = squad.captain_id
    elif _played(stats_by_player, squad.vice_captain_id):
        doubled = squad.vice_captain_id
    else:
        doubled = None

    total = 0
    for slot in squad.slots:
        stats = stats_by_player.get(slot.player_id)
        if stats is None or not stats.played:
            continue
        player = registry.get_player(slot.player_id)
        if player is None:
            continue
        points = score_player(stats, player.position, rules)
        if slot.player_id == doubled:
            points *= rules.captain_multiplier
        total += points
    return total


def score_squads(
    squads: Iterable[Squad],
    stats_by_player: Mapping[str, MatchStats],
    registry: PlayerRegistry,
    rules: ScoringRules = DEFAULT_SCORING,
) -> List[ScoreLeaf]:
    return [
        ScoreLeaf(owner=squad.owner, score=score_squad(squad, stats_by_player, registry, rules))
        for squad in squads
    ]

"""Squad state machine: composition, budget, transfers, lineup and captaincy."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, MutableMapping, Optional, Sequence

from gwledger.config import LeagueRules, get_rules
from gwledger.errors import (
    AlreadyExists,
    ArityError,
    DuplicateCaptain,
    InsufficientBudget,
    NotStarter,
    PlayerAlreadyInSquad,
    PositionQuotaViolation,
    SquadFull,
    TeamLimitExceeded,
    UnknownPlayer,
    UnknownSquad,
    WildcardAlreadyUsed,
)
from gwledger.models import PlayerRecord, Position, Squad, SquadSlot
from gwledger.registry import PlayerRegistry


logger = logging.getLogger(__name__)


class RosterLedger:
    """Owns every squad mutation.

    Each operation validates fully before touching state, so a rejected call
    leaves the squad exactly as it was.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        squads: Optional[MutableMapping[str, Squad]] = None,
        rules: Optional[LeagueRules] = None,
    ):
        self.registry = registry
        self.squads: MutableMapping[str, Squad] = squads if squads is not None else {}
        self.rules = rules or get_rules()

    # -- lookups --

    def get(self, owner: str) -> Squad:
        squad = self.squads.get(owner)
        if squad is None:
            raise UnknownSquad(owner)
        return squad

    def owners(self) -> List[str]:
        return list(self.squads.keys())

    def _player(self, player_id: str) -> PlayerRecord:
        player = self.registry.get_player(player_id)
        if player is None:
            raise UnknownPlayer(player_id)
        return player

    # -- lifecycle --

    def create(self, owner: str, period: int) -> Squad:
        if owner in self.squads:
            raise AlreadyExists(f"Squad for owner {owner!r} already exists")
        squad = Squad(
            owner=owner,
            budget=self.rules.starting_budget,
            free_transfers=self.rules.max_free_transfers,
            joined_period=period,
        )
        self.squads[owner] = squad
        logger.info("Created squad for %s in period %d", owner, period)
        return squad

    # -- composition --

    def _check_can_add(self, squad: Squad, player: PlayerRecord, *, leaving: Optional[SquadSlot] = None) -> int:
        """Validate adding ``player``, optionally as if ``leaving`` were already gone.

        Returns the budget that would be available for the purchase.
        """
        if squad.find_slot(player.player_id) is not None and (leaving is None or leaving.player_id != player.player_id):
            raise PlayerAlreadyInSquad(f"Player {player.player_id!r} is already in the squad")

        slot_count = len(squad.slots) - (1 if leaving is not None else 0)
        if slot_count >= self.rules.squad_size:
            raise SquadFull(f"Squad already holds {self.rules.squad_size} players")

        budget = squad.budget
        if leaving is not None:
            budget += self._refund_price(leaving)
        if player.price > budget:
            raise InsufficientBudget(player.price, budget)

        same_team = squad.team_count(player.team)
        if leaving is not None and leaving.team == player.team:
            same_team -= 1
        if same_team >= self.rules.team_max_players:
            raise TeamLimitExceeded(player.team, self.rules.team_max_players)
        return budget

    def _refund_price(self, slot: SquadSlot) -> int:
        player = self.registry.get_player(slot.player_id)
        return player.price if player is not None else 0

    def add_slot(self, owner: str, player_id: str) -> SquadSlot:
        squad = self.get(owner)
        player = self._player(player_id)
        self._check_can_add(squad, player)

        slot = SquadSlot(player_id=player.player_id, team=player.team)
        squad.slots.append(slot)
        squad.budget -= player.price
        logger.debug("%s added %s for %d (budget now %d)", owner, player_id, player.price, squad.budget)
        return slot

    def _take_slot(self, squad: Squad, slot: SquadSlot) -> None:
        squad.slots.remove(slot)
        squad.budget += self._refund_price(slot)
        if squad.captain_id == slot.player_id:
            squad.captain_id = None
        if squad.vice_captain_id == slot.player_id:
            squad.vice_captain_id = None

    def remove_slot(self, owner: str, player_id: str) -> None:
        squad = self.get(owner)
        slot = squad.find_slot(player_id)
        if slot is None:
            raise UnknownPlayer(player_id, f"Player {player_id!r} is not in the squad of {owner!r}")
        self._take_slot(squad, slot)
        logger.debug("%s removed %s (budget now %d)", owner, player_id, squad.budget)

    def transfer(self, owner: str, player_out: str, player_in: str) -> SquadSlot:
        """Swap ``player_out`` for ``player_in``.

        Uses a free transfer when one is left, otherwise charges the transfer
        cost against total points (which may go negative).
        """
        squad = self.get(owner)
        leaving = squad.find_slot(player_out)
        if leaving is None:
            raise UnknownPlayer(player_out, f"Player {player_out!r} is not in the squad of {owner!r}")
        incoming = self._player(player_in)
        self._check_can_add(squad, incoming, leaving=leaving)

        self._take_slot(squad, leaving)
        slot = SquadSlot(player_id=incoming.player_id, team=incoming.team)
        squad.slots.append(slot)
        squad.budget -= incoming.price

        if squad.free_transfers > 0:
            squad.free_transfers -= 1
        else:
            squad.total_points -= self.rules.transfer_cost
            logger.info("%s paid %d points for transfer %s -> %s", owner, self.rules.transfer_cost, player_out, player_in)
        return slot

    def use_wildcard(self, owner: str) -> None:
        squad = self.get(owner)
        if squad.wildcard_used:
            raise WildcardAlreadyUsed(f"Wildcard already used by {owner!r}")
        squad.wildcard_used = True
        squad.free_transfers = self.rules.squad_size
        logger.info("%s played their wildcard", owner)

    # -- lineup and captaincy --

    def _check_quotas(self, positions: Iterable[Position]) -> None:
        counts = Counter(positions)
        goalkeepers = counts[Position.GOALKEEPER]
        if not self.rules.min_goalkeepers <= goalkeepers <= self.rules.max_goalkeepers:
            quota = (
                f"exactly {self.rules.min_goalkeepers}"
                if self.rules.min_goalkeepers == self.rules.max_goalkeepers
                else f"{self.rules.min_goalkeepers}-{self.rules.max_goalkeepers}"
            )
            raise PositionQuotaViolation(Position.GOALKEEPER, goalkeepers, quota)
        for position, minimum in (
            (Position.DEFENDER, self.rules.min_defenders),
            (Position.MIDFIELDER, self.rules.min_midfielders),
            (Position.FORWARD, self.rules.min_forwards),
        ):
            if counts[position] < minimum:
                raise PositionQuotaViolation(position, counts[position], f"at least {minimum}")

    def set_lineup(self, owner: str, starter_ids: Sequence[str]) -> None:
        squad = self.get(owner)
        if len(starter_ids) != self.rules.lineup_size or len(set(starter_ids)) != self.rules.lineup_size:
            raise ArityError(
                f"Lineup needs exactly {self.rules.lineup_size} distinct players, got {len(starter_ids)}"
            )

        positions: List[Position] = []
        for player_id in starter_ids:
            if squad.find_slot(player_id) is None:
                raise UnknownPlayer(player_id, f"Player {player_id!r} is not in the squad of {owner!r}")
            positions.append(self._player(player_id).position)
        self._check_quotas(positions)

        selected = set(starter_ids)
        for slot in squad.slots:
            slot.starter = slot.player_id in selected
        if squad.captain_id not in selected:
            squad.captain_id = None
        if squad.vice_captain_id not in selected:
            squad.vice_captain_id = None

    def set_captain(self, owner: str, captain_id: str, vice_captain_id: str) -> None:
        squad = self.get(owner)
        for player_id in (captain_id, vice_captain_id):
            slot = squad.find_slot(player_id)
            if slot is None:
                raise UnknownPlayer(player_id, f"Player {player_id!r} is not in the squad of {owner!r}")
            if not slot.starter:
                raise NotStarter(player_id)
        if captain_id == vice_captain_id:
            raise DuplicateCaptain("Captain and vice-captain must be different players")
        squad.captain_id = captain_id
        squad.vice_captain_id = vice_captain_id

    # -- period boundary and settlement --

    def reset_transfers(self) -> None:
        """Grant one free transfer per squad, never leaving anyone above the cap."""

        cap = self.rules.max_free_transfers
        for squad in self.squads.values():
            squad.free_transfers = min(squad.free_transfers + 1, cap)

    def credit_points(self, owner: str, period: int, points: int) -> None:
        squad = self.get(owner)
        squad.total_points += points
        squad.period_scores[period] = points

import copy

import pytest

from gwledger.config import LeagueRules
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
from gwledger.models import Position
from gwledger.roster import RosterLedger

from tests.factories import DEFAULT_LINEUP, SQUAD_COST, fill_squad, sample_registry


@pytest.fixture
def ledger() -> RosterLedger:
    return RosterLedger(sample_registry(), rules=LeagueRules())


def test_create_sets_defaults(ledger):
    squad = ledger.create("alice", 3)
    assert squad.budget == 1000
    assert squad.free_transfers == 2
    assert squad.joined_period == 3
    assert squad.captain_id is None
    assert not squad.wildcard_used


def test_create_twice_fails(ledger):
    ledger.create("alice", 1)
    with pytest.raises(AlreadyExists):
        ledger.create("alice", 2)
    assert ledger.get("alice").joined_period == 1


def test_operations_on_missing_squad_fail(ledger):
    with pytest.raises(UnknownSquad):
        ledger.add_slot("ghost", "gk1")


def test_squads_live_in_the_supplied_store():
    store = {}
    ledger = RosterLedger(sample_registry(), squads=store)
    ledger.create("alice", 1)
    assert "alice" in store


def test_add_slot_deducts_price(ledger):
    ledger.create("alice", 1)
    slot = ledger.add_slot("alice", "m1")
    assert slot.team == "ARS"
    assert not slot.starter
    assert ledger.get("alice").budget == 920


def test_add_unknown_player_fails(ledger):
    ledger.create("alice", 1)
    with pytest.raises(UnknownPlayer):
        ledger.add_slot("alice", "nobody")


def test_add_same_player_twice_fails(ledger):
    ledger.create("alice", 1)
    ledger.add_slot("alice", "m1")
    with pytest.raises(PlayerAlreadyInSquad):
        ledger.add_slot("alice", "m1")


def test_fourth_player_from_one_team_rejected(ledger):
    ledger.create("alice", 1)
    for player_id in ("gk1", "d1", "m1"):
        ledger.add_slot("alice", player_id)
    before = copy.deepcopy(ledger.get("alice"))

    with pytest.raises(TeamLimitExceeded) as excinfo:
        ledger.add_slot("alice", "ars4")

    assert excinfo.value.team == "ARS"
    assert ledger.get("alice") == before


def test_insufficient_budget(ledger):
    ledger.create("alice", 1)
    with pytest.raises(InsufficientBudget):
        ledger.add_slot("alice", "pricey")
    assert ledger.get("alice").budget == 1000
    assert ledger.get("alice").slots == []


def test_squad_full(ledger):
    fill_squad(ledger, "alice")
    squad = ledger.get("alice")
    assert len(squad.slots) == 15
    assert squad.budget == 1000 - SQUAD_COST
    with pytest.raises(SquadFull):
        ledger.add_slot("alice", "f4")


def test_remove_slot_refunds_and_clears_captaincy(ledger):
    fill_squad(ledger, "alice")
    ledger.set_lineup("alice", DEFAULT_LINEUP)
    ledger.set_captain("alice", "f1", "m1")

    ledger.remove_slot("alice", "f1")

    squad = ledger.get("alice")
    assert "f1" not in squad.player_ids
    assert squad.budget == 1000 - SQUAD_COST + 90
    assert squad.captain_id is None
    assert squad.vice_captain_id == "m1"


def test_remove_absent_player_is_an_error(ledger):
    fill_squad(ledger, "alice")
    before = copy.deepcopy(ledger.get("alice"))
    with pytest.raises(UnknownPlayer):
        ledger.remove_slot("alice", "f4")
    assert ledger.get("alice") == before


def test_transfer_uses_free_transfer(ledger):
    fill_squad(ledger, "alice")
    ledger.transfer("alice", "f3", "f4")
    squad = ledger.get("alice")
    assert "f4" in squad.player_ids
    assert "f3" not in squad.player_ids
    assert squad.free_transfers == 1
    assert squad.total_points == 0
    assert squad.budget == 1000 - SQUAD_COST + 70 - 10


def test_transfer_without_free_transfers_costs_points(ledger):
    fill_squad(ledger, "alice")
    ledger.transfer("alice", "f3", "f4")
    ledger.transfer("alice", "f4", "f3")
    ledger.transfer("alice", "f3", "f4")
    squad = ledger.get("alice")
    assert squad.free_transfers == 0
    # total points are allowed to go negative
    assert squad.total_points == -4


def test_transfer_within_full_squad_checks_limits_after_removal(ledger):
    fill_squad(ledger, "alice")
    # ARS already holds 3 players; swapping one Arsenal player for another is fine
    ledger.transfer("alice", "d1", "ars4")
    assert "ars4" in ledger.get("alice").player_ids


def test_failed_transfer_changes_nothing(ledger):
    fill_squad(ledger, "alice")
    before = copy.deepcopy(ledger.get("alice"))
    with pytest.raises(TeamLimitExceeded):
        ledger.transfer("alice", "f3", "ars4")
    with pytest.raises(InsufficientBudget):
        ledger.transfer("alice", "f3", "pricey")
    with pytest.raises(UnknownPlayer):
        ledger.transfer("alice", "nobody", "f4")
    assert ledger.get("alice") == before


def test_wildcard_grants_squad_size_transfers_once(ledger):
    ledger.create("alice", 1)
    ledger.use_wildcard("alice")
    assert ledger.get("alice").free_transfers == 15
    with pytest.raises(WildcardAlreadyUsed):
        ledger.use_wildcard("alice")


def test_set_lineup_accepts_valid_formation(ledger):
    fill_squad(ledger, "alice")
    ledger.set_lineup("alice", DEFAULT_LINEUP)
    starters = {slot.player_id for slot in ledger.get("alice").starters()}
    assert starters == set(DEFAULT_LINEUP)


def test_set_lineup_requires_eleven(ledger):
    fill_squad(ledger, "alice")
    with pytest.raises(ArityError):
        ledger.set_lineup("alice", DEFAULT_LINEUP[:10])
    with pytest.raises(ArityError):
        ledger.set_lineup("alice", DEFAULT_LINEUP[:10] + ["gk1"])


def test_set_lineup_unknown_player(ledger):
    fill_squad(ledger, "alice")
    with pytest.raises(UnknownPlayer):
        ledger.set_lineup("alice", DEFAULT_LINEUP[:10] + ["f4"])


def test_set_lineup_without_goalkeeper_names_goalkeeper_quota(ledger):
    fill_squad(ledger, "alice")
    lineup = ["d5" if player_id == "gk1" else player_id for player_id in DEFAULT_LINEUP]
    with pytest.raises(PositionQuotaViolation) as excinfo:
        ledger.set_lineup("alice", lineup)
    assert excinfo.value.position is Position.GOALKEEPER
    assert "goalkeeper" in str(excinfo.value)
    assert ledger.get("alice").starters() == []


def test_set_lineup_two_goalkeepers_rejected(ledger):
    fill_squad(ledger, "alice")
    lineup = ["gk2" if player_id == "m4" else player_id for player_id in DEFAULT_LINEUP]
    with pytest.raises(PositionQuotaViolation) as excinfo:
        ledger.set_lineup("alice", lineup)
    assert excinfo.value.position is Position.GOALKEEPER


def test_set_lineup_too_few_defenders(ledger):
    fill_squad(ledger, "alice")
    lineup = ["m5" if player_id == "d3" else player_id for player_id in DEFAULT_LINEUP]
    with pytest.raises(PositionQuotaViolation) as excinfo:
        ledger.set_lineup("alice", lineup)
    assert excinfo.value.position is Position.DEFENDER


def test_set_lineup_replaces_previous_starters(ledger):
    fill_squad(ledger, "alice")
    ledger.set_lineup("alice", DEFAULT_LINEUP)
    ledger.set_captain("alice", "m4", "f1")
    second = ["d4" if player_id == "m4" else player_id for player_id in DEFAULT_LINEUP]

    ledger.set_lineup("alice", second)

    squad = ledger.get("alice")
    assert not squad.find_slot("m4").starter
    assert squad.find_slot("d4").starter
    assert squad.captain_id is None
    assert squad.vice_captain_id == "f1"


def test_set_captain_requires_starters(ledger):
    fill_squad(ledger, "alice")
    ledger.set_lineup("alice", DEFAULT_LINEUP)
    with pytest.raises(NotStarter):
        ledger.set_captain("alice", "m5", "f1")
    with pytest.raises(DuplicateCaptain):
        ledger.set_captain("alice", "f1", "f1")
    ledger.set_captain("alice", "f1", "m3")
    squad = ledger.get("alice")
    assert (squad.captain_id, squad.vice_captain_id) == ("f1", "m3")


def test_reset_transfers_increments_up_to_cap(ledger):
    ledger.create("alice", 1)
    ledger.create("bob", 1)
    ledger.get("alice").free_transfers = 0
    ledger.reset_transfers()
    assert ledger.get("alice").free_transfers == 1
    assert ledger.get("bob").free_transfers == 2
    ledger.reset_transfers()
    assert ledger.get("alice").free_transfers == 2
    assert ledger.get("bob").free_transfers == 2


def test_reset_transfers_brings_wildcard_allowance_back_to_cap(ledger):
    ledger.create("alice", 1)
    ledger.use_wildcard("alice")
    ledger.reset_transfers()
    assert ledger.get("alice").free_transfers == 2


def test_credit_points_records_period_score(ledger):
    ledger.create("alice", 1)
    ledger.credit_points("alice", 1, 42)
    squad = ledger.get("alice")
    assert squad.total_points == 42
    assert squad.period_scores == {1: 42}

import pytest
from pydantic import ValidationError

from gwledger.models import MatchStats, PlayerRecord, Position, ScoreLeaf


def test_player_record_is_frozen():
    record = PlayerRecord(
        player_id="p1",
        name="Test Player",
        team="ARS",
        position=Position.MIDFIELDER,
        price=75,
    )

    assert record.player_id == "p1"
    assert record.position is Position.MIDFIELDER

    with pytest.raises((TypeError, ValidationError)):
        record.player_id = "p2"  # type: ignore[attr-defined]


def test_player_record_parses_position_code():
    record = PlayerRecord.model_validate({"player_id": "p1", "team": "ARS", "position": "GK", "price": 40})
    assert record.position is Position.GOALKEEPER


def test_player_record_rejects_unknown_position():
    with pytest.raises(ValidationError):
        PlayerRecord(player_id="p1", team="ARS", position="Striker", price=40)


def test_match_stats_reject_negative_counts():
    with pytest.raises(ValidationError):
        MatchStats(played=True, goals=-1)


def test_score_leaf_requires_non_negative_score():
    assert ScoreLeaf(owner="alice", score=0).score == 0
    with pytest.raises(ValidationError):
        ScoreLeaf(owner="alice", score=-5)

"""Read-only interfaces to the player registry and the match statistics feed."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Protocol, runtime_checkable

from gwledger.models import MatchStats, PlayerRecord


@runtime_checkable
class PlayerRegistry(Protocol):
    def get_player(self, player_id: str) -> Optional[PlayerRecord]:
        """Return the registry entry for ``player_id`` or None."""
        ...


@runtime_checkable
class StatsSource(Protocol):
    def get_stats(self, period: int) -> Mapping[str, MatchStats]:
        """Return match statistics keyed by player id for ``period``."""
        ...


class InMemoryRegistry:
    """Dict-backed registry used by the CLI, the API and tests."""

    def __init__(self, players: Iterable[PlayerRecord] = ()):
        self._players: Dict[str, PlayerRecord] = {player.player_id: player for player in players}

    def get_player(self, player_id: str) -> Optional[PlayerRecord]:
        return self._players.get(player_id)

    def upsert(self, player: PlayerRecord) -> None:
        self._players[player.player_id] = player

    def __len__(self) -> int:
        return len(self._players)

    @classmethod
    def from_json(cls, path: Path) -> "InMemoryRegistry":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(PlayerRecord.model_validate(item) for item in data)


class InMemoryStats:
    def __init__(self, stats_by_period: Mapping[int, Mapping[str, MatchStats]] | None = None):
        self._stats: Dict[int, Dict[str, MatchStats]] = {
            period: dict(stats) for period, stats in (stats_by_period or {}).items()
        }

    def get_stats(self, period: int) -> Mapping[str, MatchStats]:
        return self._stats.get(period, {})

    def put(self, period: int, stats: Mapping[str, MatchStats]) -> None:
        self._stats[period] = dict(stats)


def load_stats_json(path: Path) -> Dict[str, MatchStats]:
    """Load a ``{player_id: {...stats}}`` JSON document."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object keyed by player id in {path}")
    return {player_id: MatchStats.model_validate(raw) for player_id, raw in data.items()}

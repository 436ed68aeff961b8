"""Command-line interface for building a period's score commitment."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from gwledger.commitment import build_commitment
from gwledger.models import Squad, SquadSlot
from gwledger.persistence import CommitmentStore
from gwledger.registry import InMemoryRegistry, PlayerRegistry, load_stats_json
from gwledger.scoring import score_squads


logger = logging.getLogger(__name__)


class SquadSnapshot(BaseModel):
    owner: str = Field(..., min_length=1)
    players: List[str]
    captain_id: Optional[str] = None
    vice_captain_id: Optional[str] = None


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the Merkle commitment of squad scores for a game week")
    parser.add_argument("period", type=int, help="Game week to settle")
    parser.add_argument("--players", type=Path, required=True, help="Player registry JSON (list of players)")
    parser.add_argument("--squads", type=Path, required=True, help="Squad snapshot JSON (list of squads)")
    parser.add_argument("--stats", type=Path, required=True, help="Match stats JSON keyed by player id")
    parser.add_argument("--db", type=Path, default=Path("gwledger.sqlite"), help="Commitment store path")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to write the {owner, score, proof} update payload",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_squads(path: Path, registry: PlayerRegistry, period: int) -> List[Squad]:
    data = json.loads(path.read_text(encoding="utf-8"))
    squads: List[Squad] = []
    for raw in data:
        snapshot = SquadSnapshot.model_validate(raw)
        slots = []
        for player_id in snapshot.players:
            player = registry.get_player(player_id)
            if player is None:
                logger.warning("Squad %s references unknown player %s", snapshot.owner, player_id)
            slots.append(SquadSlot(player_id=player_id, team=player.team if player else "", starter=True))
        squads.append(
            Squad(
                owner=snapshot.owner,
                budget=0,
                free_transfers=0,
                joined_period=period,
                slots=slots,
                captain_id=snapshot.captain_id,
                vice_captain_id=snapshot.vice_captain_id,
            )
        )
    return squads


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    registry = InMemoryRegistry.from_json(args.players)
    squads = load_squads(args.squads, registry, args.period)
    stats = load_stats_json(args.stats)

    leaves = score_squads(squads, stats, registry)
    commitment = build_commitment(args.period, leaves)

    store = CommitmentStore(args.db)
    store.save_commitment(commitment)

    print(f"Merkle root for game week {args.period}: {commitment.root_hex}")
    print(f"Committed {len(commitment.leaves)} squads to {store.db_path}")

    if args.output:
        args.output.write_text(json.dumps(commitment.update_payload(), indent=2), encoding="utf-8")
        print(f"Wrote update payload to {args.output}")


if __name__ == "__main__":
    main()

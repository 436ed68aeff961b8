"""REST API for building commitments and settling squad scores."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException

from gwledger.api.schemas import (
    CommitmentResponse,
    LeafResponse,
    ProofResponse,
    SettleRequest,
    SettleResponse,
    SquadResponse,
    SquadSlotResponse,
)
from gwledger.commitment import build_commitment, from_hex, to_hex
from gwledger.config_loader import OracleSettings
from gwledger.errors import (
    CommitmentError,
    LedgerError,
    OraclePending,
    OracleTransportError,
    UnknownQuestion,
    UnknownSquad,
)
from gwledger.models import ScoreLeaf, Squad
from gwledger.oracle import InMemoryOracle, OracleGateway
from gwledger.persistence import CommitmentRecord, CommitmentStore
from gwledger.registry import InMemoryRegistry, InMemoryStats, StatsSource
from gwledger.roster import RosterLedger
from gwledger.scoring import score_squads
from gwledger.settlement import SettlementCoordinator


logger = logging.getLogger(__name__)


def _squad_to_response(squad: Squad) -> SquadResponse:
    return SquadResponse(
        owner=squad.owner,
        budget=squad.budget,
        total_points=squad.total_points,
        free_transfers=squad.free_transfers,
        wildcard_used=squad.wildcard_used,
        captain_id=squad.captain_id,
        vice_captain_id=squad.vice_captain_id,
        joined_period=squad.joined_period,
        slots=[
            SquadSlotResponse(player_id=slot.player_id, team=slot.team, starter=slot.starter)
            for slot in squad.slots
        ],
        period_scores=dict(squad.period_scores),
    )


def _record_to_response(record: CommitmentRecord) -> CommitmentResponse:
    return CommitmentResponse(
        period=record.period,
        root=record.root_hex,
        leaf_count=len(record.leaves),
        created_at=record.created_at.isoformat(),
        leaves=[LeafResponse(owner=leaf.owner, score=leaf.score) for leaf in record.leaves],
    )


def create_app(
    *,
    coordinator: Optional[SettlementCoordinator] = None,
    stats: Optional[StatsSource] = None,
    store: Optional[CommitmentStore] = None,
) -> FastAPI:
    app = FastAPI(title="gwledger settlement")
    if coordinator is None:
        ledger = RosterLedger(InMemoryRegistry())
        gateway = OracleGateway(InMemoryOracle(), OracleSettings(arbitrator="local"))
        coordinator = SettlementCoordinator(ledger, gateway)
    store = store or CommitmentStore(Path(__file__).resolve().parent.parent / "gwledger.sqlite")
    stats = stats or InMemoryStats()
    ledger = coordinator.ledger

    app.state.coordinator = coordinator
    app.state.commitment_store = store
    app.state.stats = stats

    def _fetch_commitment_or_404(period: int) -> CommitmentRecord:
        record = store.get_commitment(period)
        if record is None:
            raise HTTPException(status_code=404, detail="Commitment not found")
        return record

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/squads/{owner}", response_model=SquadResponse)
    async def get_squad(owner: str):
        try:
            squad = ledger.get(owner)
        except UnknownSquad as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _squad_to_response(squad)

    @app.post("/periods/{period}/commitment", response_model=CommitmentResponse)
    async def build_period_commitment(period: int):
        leaves = score_squads(ledger.squads.values(), stats.get_stats(period), ledger.registry)
        try:
            commitment = build_commitment(period, leaves)
        except CommitmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        store.save_commitment(commitment)
        logger.info("Stored commitment for period %d (%d squads)", period, len(leaves))
        return _record_to_response(_fetch_commitment_or_404(period))

    @app.get("/periods/{period}/commitment", response_model=CommitmentResponse)
    async def get_period_commitment(period: int):
        return _record_to_response(_fetch_commitment_or_404(period))

    @app.get("/periods/{period}/proofs/{owner}", response_model=ProofResponse)
    async def get_proof(period: int, owner: str):
        record = _fetch_commitment_or_404(period)
        try:
            leaf, proof = record.proof_for(owner)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"No leaf for owner {owner!r}") from exc
        return ProofResponse(
            period=period,
            root=record.root_hex,
            owner=leaf.owner,
            score=leaf.score,
            proof=[to_hex(sibling) for sibling in proof],
        )

    @app.post("/periods/{period}/settle", response_model=SettleResponse)
    async def settle(period: int, request: SettleRequest):
        leaves = [ScoreLeaf(owner=entry.owner, score=entry.score) for entry in request.entries]
        try:
            proofs = [[from_hex(sibling) for sibling in entry.proof] for entry in request.entries]
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid proof digest: {exc}") from exc

        try:
            report = coordinator.apply_scores(period, leaves, proofs)
        except OraclePending as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except OracleTransportError as exc:
            logger.warning("Oracle bridge unavailable while settling period %d: %s", period, exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except UnknownQuestion as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except LedgerError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return SettleResponse(
            period=period,
            applied=[leaf.owner for leaf in report.applied],
            skipped=[leaf.owner for leaf in report.skipped],
        )

    return app

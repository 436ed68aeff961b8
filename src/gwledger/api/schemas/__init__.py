"""Pydantic models for API I/O."""

from .settlement import (
    CommitmentResponse,
    LeafResponse,
    ProofResponse,
    SettleRequest,
    SettleResponse,
    SettlementEntry,
)
from .squad import SquadResponse, SquadSlotResponse

__all__ = [
    "CommitmentResponse",
    "LeafResponse",
    "ProofResponse",
    "SettleRequest",
    "SettleResponse",
    "SettlementEntry",
    "SquadResponse",
    "SquadSlotResponse",
]

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from gwledger.models import MAX_SCORE


class LeafResponse(BaseModel):
    owner: str
    score: int


class CommitmentResponse(BaseModel):
    period: int
    root: str
    leaf_count: int
    created_at: str | None = None
    leaves: List[LeafResponse] = Field(default_factory=list)


class ProofResponse(BaseModel):
    period: int
    root: str
    owner: str
    score: int
    proof: List[str]


class SettlementEntry(BaseModel):
    owner: str = Field(..., min_length=1)
    score: int = Field(..., ge=0, le=MAX_SCORE)
    proof: List[str] = Field(default_factory=list)


class SettleRequest(BaseModel):
    entries: List[SettlementEntry] = Field(..., min_length=1)


class SettleResponse(BaseModel):
    period: int
    applied: List[str]
    skipped: List[str]

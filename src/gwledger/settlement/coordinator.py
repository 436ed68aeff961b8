"""Period lifecycle and exactly-once crediting of verified scores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, MutableMapping, Optional, Sequence, Tuple

from gwledger.commitment import ProofVerifier
from gwledger.errors import (
    EmptyBatch,
    InvalidProof,
    LengthMismatch,
    OraclePending,
    PeriodStateError,
)
from gwledger.models import ScoreLeaf
from gwledger.oracle import PENDING, OracleGateway
from gwledger.roster import RosterLedger


logger = logging.getLogger(__name__)


class PeriodState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ENDED = "ended"


class SettlementBook:
    """Applied flags keyed by ``(owner, period)``."""

    def __init__(self, records: Optional[MutableMapping[Tuple[str, int], bool]] = None):
        self.records: MutableMapping[Tuple[str, int], bool] = records if records is not None else {}

    def is_applied(self, owner: str, period: int) -> bool:
        return self.records.get((owner, period), False)

    def mark_applied(self, owner: str, period: int) -> None:
        self.records[(owner, period)] = True


@dataclass
class SettlementReport:
    period: int
    applied: List[ScoreLeaf] = field(default_factory=list)
    skipped: List[ScoreLeaf] = field(default_factory=list)


class SettlementCoordinator:
    def __init__(
        self,
        ledger: RosterLedger,
        gateway: OracleGateway,
        book: Optional[SettlementBook] = None,
    ):
        self.ledger = ledger
        self.gateway = gateway
        self.book = book or SettlementBook()
        self.state = PeriodState.IDLE
        self.current_period: Optional[int] = None

    # -- lifecycle --

    def start_period(self, period: int, prompt: Optional[str] = None) -> Optional[str]:
        """Activate ``period`` and ask the oracle for the previous period's root.

        Returns the question id, or None when there is no previous period.
        """
        if self.state is PeriodState.ACTIVE:
            raise PeriodStateError(f"Period {self.current_period} is still active")
        if self.current_period is not None and period <= self.current_period:
            raise PeriodStateError(f"Period {period} does not follow period {self.current_period}")

        question_id = None
        previous = period - 1
        if previous > 0:
            question_id = self.gateway.open_question(previous, prompt)
        self.state = PeriodState.ACTIVE
        self.current_period = period
        logger.info("Period %d started", period)
        return question_id

    def end_period(self) -> None:
        if self.state is not PeriodState.ACTIVE:
            raise PeriodStateError("No active period to end")
        self.ledger.reset_transfers()
        self.state = PeriodState.ENDED
        logger.info("Period %d ended; free transfers reset", self.current_period)

    # -- settlement --

    def apply_scores(
        self,
        period: int,
        leaves: Sequence[ScoreLeaf],
        proofs: Sequence[Sequence[bytes]],
    ) -> SettlementReport:
        """Credit every verified leaf at most once for ``period``.

        All checks run before any squad is touched: one bad proof rejects the
        whole batch. Leaves already applied for this period are skipped.
        """
        if not leaves:
            raise EmptyBatch("Settlement batch needs at least one leaf")
        if len(leaves) != len(proofs):
            raise LengthMismatch(f"{len(leaves)} leaves but {len(proofs)} proofs")

        root = self.gateway.resolved_root_for_period(period)
        if root is PENDING:
            raise OraclePending(period, self.gateway.question_for(period).question_id)

        for leaf in leaves:
            self.ledger.get(leaf.owner)

        verifier = ProofVerifier(root)
        failed = verifier.first_failure(leaves, proofs)
        if failed is not None:
            logger.warning("Rejected settlement batch for period %d at leaf %d", period, failed)
            raise InvalidProof(failed, leaves[failed].owner)

        report = SettlementReport(period=period)
        for leaf in leaves:
            if self.book.is_applied(leaf.owner, period):
                logger.warning("Skipping already applied score for %s in period %d", leaf.owner, period)
                report.skipped.append(leaf)
                continue
            self.ledger.credit_points(leaf.owner, period, leaf.score)
            self.book.mark_applied(leaf.owner, period)
            report.applied.append(leaf)

        logger.info(
            "Applied %d scores for period %d (%d skipped)",
            len(report.applied),
            period,
            len(report.skipped),
        )
        return report

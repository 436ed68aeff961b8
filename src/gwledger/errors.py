"""Exception taxonomy for the settlement ledger.

Validation errors are raised before any state changes. Protocol errors abort
the whole enclosing batch. ``OraclePending`` sits outside the ``LedgerError``
tree: an unresolved oracle question is a liveness condition, not a failure.
"""

from __future__ import annotations

from typing import Optional

from gwledger.models import Position


class LedgerError(RuntimeError):
    """Base class for every rejected ledger operation."""


class ValidationError(LedgerError):
    pass


class ArityError(ValidationError):
    pass


class UnknownPlayer(ValidationError):
    def __init__(self, player_id: str, message: Optional[str] = None):
        super().__init__(message or f"Unknown player {player_id!r}")
        self.player_id = player_id


class UnknownSquad(ValidationError):
    def __init__(self, owner: str):
        super().__init__(f"No squad registered for owner {owner!r}")
        self.owner = owner


class PositionQuotaViolation(ValidationError):
    def __init__(self, position: Position, count: int, quota: str):
        super().__init__(f"{position.name.lower()} quota violated: {count} selected, {quota} required")
        self.position = position
        self.count = count
        self.quota = quota


class DuplicateCaptain(ValidationError):
    pass


class NotStarter(ValidationError):
    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id!r} is not in the starting lineup")
        self.player_id = player_id


class TeamLimitExceeded(ValidationError):
    def __init__(self, team: str, limit: int):
        super().__init__(f"Squad already holds {limit} players from team {team!r}")
        self.team = team
        self.limit = limit


class InsufficientBudget(ValidationError):
    def __init__(self, price: int, budget: int):
        super().__init__(f"Price {price} exceeds remaining budget {budget}")
        self.price = price
        self.budget = budget


class SquadFull(ValidationError):
    pass


class PlayerAlreadyInSquad(ValidationError):
    pass


class WildcardAlreadyUsed(ValidationError):
    pass


class AlreadyExists(ValidationError):
    pass


class LengthMismatch(ValidationError):
    pass


class EmptyBatch(ValidationError):
    pass


class ProtocolError(LedgerError):
    pass


class InvalidProof(ProtocolError):
    def __init__(self, index: int, owner: str):
        super().__init__(f"Inclusion proof #{index} for owner {owner!r} does not match the finalized root")
        self.index = index
        self.owner = owner


class OneQuestionPerPeriod(ProtocolError):
    def __init__(self, period: int):
        super().__init__(f"An oracle question already exists for period {period}")
        self.period = period


class UnknownQuestion(ProtocolError):
    pass


class PeriodStateError(ProtocolError):
    pass


class CommitmentError(LedgerError):
    pass


class EmptyCommitment(CommitmentError):
    pass


class DuplicateLeaf(CommitmentError):
    def __init__(self, owner: str):
        super().__init__(f"Owner {owner!r} appears more than once in the leaf set")
        self.owner = owner


class OraclePending(Exception):
    """Raised when settlement is attempted before the oracle has finalized a root."""

    def __init__(self, period: int, question_id: str):
        super().__init__(f"Oracle question {question_id} for period {period} is still pending")
        self.period = period
        self.question_id = question_id


class OracleTransportError(RuntimeError):
    """Raised when the oracle bridge cannot be reached or answers unexpectedly."""


__all__ = [
    "AlreadyExists",
    "ArityError",
    "CommitmentError",
    "DuplicateCaptain",
    "DuplicateLeaf",
    "EmptyBatch",
    "EmptyCommitment",
    "InsufficientBudget",
    "InvalidProof",
    "LedgerError",
    "LengthMismatch",
    "NotStarter",
    "OneQuestionPerPeriod",
    "OraclePending",
    "OracleTransportError",
    "PeriodStateError",
    "PlayerAlreadyInSquad",
    "PositionQuotaViolation",
    "ProtocolError",
    "SquadFull",
    "TeamLimitExceeded",
    "UnknownPlayer",
    "UnknownQuestion",
    "UnknownSquad",
    "ValidationError",
    "WildcardAlreadyUsed",
]

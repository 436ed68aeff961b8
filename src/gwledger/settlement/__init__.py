"""Settlement lifecycle."""

from .coordinator import PeriodState, SettlementBook, SettlementCoordinator, SettlementReport

__all__ = ["PeriodState", "SettlementBook", "SettlementCoordinator", "SettlementReport"]

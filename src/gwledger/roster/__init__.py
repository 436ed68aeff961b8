"""Squad ownership and roster rules."""

from .ledger import RosterLedger

__all__ = ["RosterLedger"]

"""Fantasy game-week score settlement with Merkle commitments and oracle-finalized roots."""

__version__ = "0.1.0"

"""Persistence layer for published period commitments."""

from __future__ import annotations

import json
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from gwledger.commitment import InclusionProof, MerkleCommitment, from_hex, to_hex
from gwledger.models import ScoreLeaf


@dataclass
class CommitmentRecord:
    period: int
    root: bytes
    created_at: datetime
    leaves: List[ScoreLeaf]
    proofs: Dict[str, InclusionProof]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def proof_for(self, owner: str) -> Tuple[ScoreLeaf, InclusionProof]:
        for leaf in self.leaves:
            if leaf.owner == owner:
                return leaf, self.proofs[owner]
        raise KeyError(owner)


class CommitmentStore:
    """Simple SQLite-backed store for commitment roots and their proofs."""

    def __init__(self, db_path: Path | str):
        env_db = os.getenv("GWLEDGER_DB_PATH")
        self.db_path = Path(env_db) if env_db else Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS commitments (
                    period INTEGER PRIMARY KEY,
                    root TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    leaves_json TEXT NOT NULL,
                    proofs_json TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def save_commitment(
        self,
        commitment: MerkleCommitment,
        *,
        created_at: Optional[datetime] = None,
    ) -> None:
        """Store ``commitment``, replacing any earlier build for the same period."""

        created_at = created_at or datetime.now(timezone.utc)
        leaves = [leaf.model_dump() for leaf in commitment.leaves]
        proofs = {
            owner: [to_hex(sibling) for sibling in proof]
            for owner, proof in commitment.proofs.items()
        }
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO commitments (
                    period, root, created_at, leaves_json, proofs_json
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    commitment.period,
                    commitment.root_hex,
                    created_at.isoformat(),
                    json.dumps(leaves),
                    json.dumps(proofs),
                ),
            )
            conn.commit()

    def _row_to_record(self, row: sqlite3.Row) -> CommitmentRecord:
        proofs_raw = json.loads(row["proofs_json"])
        return CommitmentRecord(
            period=row["period"],
            root=from_hex(row["root"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            leaves=[ScoreLeaf.model_validate(item) for item in json.loads(row["leaves_json"])],
            proofs={
                owner: tuple(from_hex(sibling) for sibling in siblings)
                for owner, siblings in proofs_raw.items()
            },
        )

    def get_commitment(self, period: int) -> Optional[CommitmentRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM commitments WHERE period = ?",
                (period,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def list_commitments(self, limit: int = 50) -> List[CommitmentRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM commitments ORDER BY period DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

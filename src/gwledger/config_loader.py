"""Persist and load oracle settings profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class OracleSettings:
    arbitrator: str
    timeout: int = 86_400
    min_bond: int = 0
    bridge_url: Optional[str] = None

    @classmethod
    def load(cls, path: Path) -> "OracleSettings":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            arbitrator=data["arbitrator"],
            timeout=int(data.get("timeout", 86_400)),
            min_bond=int(data.get("min_bond", 0)),
            bridge_url=data.get("bridge_url"),
        )

    def save(self, path: Path) -> None:
        payload = {
            "arbitrator": self.arbitrator,
            "timeout": self.timeout,
            "min_bond": self.min_bond,
            "bridge_url": self.bridge_url,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

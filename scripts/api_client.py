"""Lightweight REST client for the gwledger settlement API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the gwledger REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("period", type=int, help="Game week")
    parser.add_argument("--commit", action="store_true", help="Build and store the commitment for the period")
    parser.add_argument("--proof", metavar="OWNER", help="Fetch the inclusion proof for a squad owner")
    parser.add_argument("--settle", type=Path, metavar="PAYLOAD", help="Submit an update payload JSON for settlement")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.commit:
            resp = client.post(f"/periods/{args.period}/commitment")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.proof:
            resp = client.get(f"/periods/{args.period}/proofs/{args.proof}")
            if resp.status_code == 404:
                raise SystemExit(f"no proof for {args.proof} in period {args.period}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.settle:
            entries = json.loads(args.settle.read_text(encoding="utf-8"))
            resp = client.post(f"/periods/{args.period}/settle", json={"entries": entries})
            if resp.status_code == 409:
                raise SystemExit(f"oracle has not finalized period {args.period} yet; try again later")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()

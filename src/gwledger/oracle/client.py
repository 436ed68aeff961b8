"""Clients for the external arbitration oracle.

The oracle is opaque: a question is asked once and eventually either stays
pending or reports a finalized 32-byte answer. Dispute handling lives
entirely on the oracle side.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol, runtime_checkable
from uuid import uuid4

import httpx

from gwledger.commitment import from_hex, to_hex
from gwledger.errors import OracleTransportError, UnknownQuestion


logger = logging.getLogger(__name__)


@runtime_checkable
class OracleClient(Protocol):
    def ask(self, question: str, arbitrator: str, timeout: int, min_bond: int) -> str:
        """Submit a question and return its identifier."""
        ...

    def result(self, question_id: str) -> Optional[bytes]:
        """Return the finalized answer, or None while the question is pending."""
        ...


class InMemoryOracle:
    """Local oracle stand-in; answers appear only when ``finalize`` is called."""

    def __init__(self) -> None:
        self.questions: Dict[str, dict] = {}
        self._answers: Dict[str, bytes] = {}

    def ask(self, question: str, arbitrator: str, timeout: int, min_bond: int) -> str:
        question_id = uuid4().hex
        self.questions[question_id] = {
            "question": question,
            "arbitrator": arbitrator,
            "timeout": timeout,
            "min_bond": min_bond,
        }
        return question_id

    def finalize(self, question_id: str, answer: bytes) -> None:
        if question_id not in self.questions:
            raise UnknownQuestion(f"Unknown oracle question {question_id}")
        self._answers[question_id] = answer

    def result(self, question_id: str) -> Optional[bytes]:
        if question_id not in self.questions:
            raise UnknownQuestion(f"Unknown oracle question {question_id}")
        return self._answers.get(question_id)


class HTTPOracleClient:
    """Client for an oracle bridge service exposing ``/questions`` over HTTP.

    Each call is a single request; polling cadence and retries belong to the
    caller.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HTTPOracleClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Oracle bridge %s %s failed: %s", method, path, exc)
            raise OracleTransportError(f"Oracle bridge unreachable: {exc}") from exc

    def ask(self, question: str, arbitrator: str, timeout: int, min_bond: int) -> str:
        resp = self._request(
            "POST",
            "/questions",
            json={
                "question": question,
                "arbitrator": arbitrator,
                "timeout": timeout,
                "min_bond": min_bond,
            },
        )
        if resp.status_code not in (200, 201):
            raise OracleTransportError(f"Oracle ask failed: {resp.status_code} {resp.text}")
        return str(resp.json()["question_id"])

    def result(self, question_id: str) -> Optional[bytes]:
        resp = self._request("GET", f"/questions/{question_id}")
        if resp.status_code == 404:
            raise UnknownQuestion(f"Unknown oracle question {question_id}")
        if resp.status_code != 200:
            raise OracleTransportError(f"Oracle result failed: {resp.status_code} {resp.text}")
        body = resp.json()
        if body.get("state") != "finalized":
            return None
        try:
            return from_hex(body["answer"])
        except (KeyError, TypeError, ValueError) as exc:
            raise OracleTransportError(f"Malformed oracle answer for {question_id}: {body!r}") from exc


def describe_answer(answer: Optional[bytes]) -> str:
    return "pending" if answer is None else to_hex(answer)

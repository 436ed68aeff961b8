"""Oracle-backed publication of commitment roots."""

from .client import HTTPOracleClient, InMemoryOracle, OracleClient
from .gateway import PENDING, OracleGateway, OracleQuestion, QuestionState, Resolution, default_prompt

__all__ = [
    "HTTPOracleClient",
    "InMemoryOracle",
    "OracleClient",
    "OracleGateway",
    "OracleQuestion",
    "PENDING",
    "QuestionState",
    "Resolution",
    "default_prompt",
]

"""Publishes commitment questions to the oracle and exposes finalized roots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import MutableMapping, Optional, Union

from gwledger.config_loader import OracleSettings
from gwledger.errors import OneQuestionPerPeriod, UnknownQuestion

from .client import OracleClient, describe_answer


logger = logging.getLogger(__name__)


class QuestionState(str, Enum):
    OPEN = "open"
    FINALIZED = "finalized"


class Resolution(Enum):
    PENDING = "pending"


PENDING = Resolution.PENDING

RootOrPending = Union[bytes, Resolution]


@dataclass
class OracleQuestion:
    period: int
    question_id: str
    prompt: str
    arbitrator: str
    timeout: int
    min_bond: int
    state: QuestionState = QuestionState.OPEN
    root: Optional[bytes] = None


def default_prompt(period: int) -> str:
    return f"What is the Merkle root of squad scores for game week {period}?"


class OracleGateway:
    def __init__(
        self,
        client: OracleClient,
        settings: OracleSettings,
        questions: Optional[MutableMapping[int, OracleQuestion]] = None,
    ):
        self.client = client
        self.settings = settings
        self.questions: MutableMapping[int, OracleQuestion] = questions if questions is not None else {}

    def open_question(self, period: int, prompt: Optional[str] = None) -> str:
        if period in self.questions:
            raise OneQuestionPerPeriod(period)
        text = prompt or default_prompt(period)
        question_id = self.client.ask(
            text,
            self.settings.arbitrator,
            self.settings.timeout,
            self.settings.min_bond,
        )
        question = OracleQuestion(
            period=period,
            question_id=question_id,
            prompt=text,
            arbitrator=self.settings.arbitrator,
            timeout=self.settings.timeout,
            min_bond=self.settings.min_bond,
        )
        self.questions[period] = question
        logger.info("Opened oracle question %s for period %d", question_id, period)
        return question_id

    def question_for(self, period: int) -> OracleQuestion:
        question = self.questions.get(period)
        if question is None:
            raise UnknownQuestion(f"No oracle question opened for period {period}")
        return question

    def _find(self, question_id: str) -> OracleQuestion:
        # Other gateways sharing the store may have added questions.
        for question in self.questions.values():
            if question.question_id == question_id:
                return question
        raise UnknownQuestion(f"Unknown oracle question {question_id}")

    def resolved_root(self, question_id: str) -> RootOrPending:
        """Finalized root for ``question_id``, or ``PENDING``. Never blocks."""

        question = self._find(question_id)
        if question.state is QuestionState.FINALIZED and question.root is not None:
            return question.root

        answer = self.client.result(question_id)
        if answer is None:
            logger.debug("Oracle question %s still pending", question_id)
            return PENDING
        question.state = QuestionState.FINALIZED
        question.root = answer
        logger.info(
            "Oracle question %s for period %d finalized: %s",
            question_id,
            question.period,
            describe_answer(answer),
        )
        return answer

    def resolved_root_for_period(self, period: int) -> RootOrPending:
        return self.resolved_root(self.question_for(period).question_id)

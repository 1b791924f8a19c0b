"""ResearchEvaluatorAgent: decides whether an answer is good enough to keep."""

from __future__ import annotations

import json
import logging
import re

from autogen_core.models import ChatCompletionClient
from pydantic import ValidationError

from research_state_manager import AnswerEvaluation

from .llm import SingleTurnAgent, strip_code_fence
from .research_prompts import EVALUATOR_PROMPT

logger = logging.getLogger(__name__)

_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_evaluation(text: str) -> AnswerEvaluation:
    """Validate the evaluator's JSON verdict.

    Output that cannot be validated counts as a rejection, with the raw text
    kept as the reasoning so the next search can still learn from it.
    """

    cleaned = strip_code_fence(text)
    match = _OBJECT_RE.search(cleaned)
    candidate = match.group(0) if match else cleaned
    try:
        return AnswerEvaluation.model_validate_json(candidate)
    except ValidationError:
        logger.warning("Evaluator output was not a valid verdict: %s", text)
    return AnswerEvaluation(is_good=False, reasoning=cleaned or "The evaluator returned no verdict.")


class ResearchEvaluatorAgent:
    """Grades research answers for completeness, accuracy, and support."""

    def __init__(self, *, model_client: ChatCompletionClient) -> None:
        self._agent = SingleTurnAgent(
            name="research_evaluator",
            system_message=EVALUATOR_PROMPT,
            description="Evaluates research answers for quality.",
            model_client=model_client,
        )

    async def evaluate(self, question: str, answer: str) -> AnswerEvaluation:
        if not question or not question.strip():
            raise ValueError("Question must be a non-empty string.")
        if not answer or not answer.strip():
            return AnswerEvaluation(is_good=False, reasoning="The answer was empty.")

        prompt = (
            f"RESEARCH QUESTION:\n{question}\n\nCANDIDATE ANSWER:\n{answer}\n\n"
            "Provide the JSON verdict as specified."
        )
        logger.info("ResearchEvaluatorAgent scoring answer for question: %s", question)
        text = await self._agent.ask(prompt)
        evaluation = parse_evaluation(text)
        logger.info(
            "ResearchEvaluatorAgent verdict: %s",
            json.dumps(evaluation.model_dump(), ensure_ascii=False),
        )
        return evaluation
